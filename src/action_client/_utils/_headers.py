from typing import Any, Iterator, Mapping, Optional, Union

from httpx import Headers

HeaderInput = Union["HeaderSet", Mapping[Any, Any], None]


class HeaderSet(Mapping[str, str]):
    """Ordered, case-insensitive mapping of header names to values.

    The casing of the first write of a name is kept for display and
    serialization; later writes replace the value only. Names may be given as
    any object with a sensible ``str()`` so that ``{"Content-Type": ...}`` and
    enum keys both work.

    Examples:
        ```python
        headers = HeaderSet({"content-type": "application/json"})
        headers.set("Content-Type", "application/xml")

        list(headers.items())  # [("content-type", "application/xml")]
        ```
    """

    def __init__(self, headers: HeaderInput = None) -> None:
        self._items: dict[str, tuple[str, str]] = {}
        self._frozen = False
        if headers:
            self.merge_override(headers)

    @staticmethod
    def _key(name: Any) -> str:
        return str(name).lower()

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError("HeaderSet is frozen and cannot be modified")

    def __getitem__(self, name: str) -> str:
        return self._items[self._key(name)][1]

    def __contains__(self, name: object) -> bool:
        return self._key(name) in self._items

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Mapping):
            return NotImplemented
        other_set = other if isinstance(other, HeaderSet) else HeaderSet(other)
        return {k: v for k, (_, v) in self._items.items()} == {
            k: v for k, (_, v) in other_set._items.items()
        }

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeaderSet({dict(self.items())!r})"

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:  # type: ignore[override]
        item = self._items.get(self._key(name))
        return item[1] if item is not None else default

    def set(self, name: Any, value: Any) -> None:
        self._check_mutable()
        key = self._key(name)
        display = self._items[key][0] if key in self._items else str(name)
        self._items[key] = (display, str(value))

    def remove(self, name: Any) -> None:
        self._check_mutable()
        self._items.pop(self._key(name), None)

    def merge_with_defaults(self, defaults: HeaderInput) -> "HeaderSet":
        """Add every header from ``defaults`` that is not already present."""
        self._check_mutable()
        for name, value in _pairs(defaults):
            if name not in self:
                self.set(name, value)
        return self

    def merge_override(self, overrides: HeaderInput) -> "HeaderSet":
        """Replace or add every header from ``overrides``."""
        self._check_mutable()
        for name, value in _pairs(overrides):
            self.set(name, value)
        return self

    def freeze(self) -> "HeaderSet":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "HeaderSet":
        """Return a mutable copy, keeping the display casing."""
        clone = HeaderSet()
        clone._items = dict(self._items)
        return clone

    def to_dict(self) -> dict[str, str]:
        return dict(self.items())

    def to_httpx(self) -> Headers:
        return Headers(list(self.items()))


def _pairs(headers: HeaderInput) -> Iterator[tuple[Any, Any]]:
    if not headers:
        return iter(())
    # snapshot, so merging a set into itself is safe
    return iter(list(headers.items()))
