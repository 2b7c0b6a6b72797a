import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Generator, Optional

import pytest
from click.testing import CliRunner
from jinja2 import DictLoader

from action_client import (
    ActionClient,
    AdapterRegistry,
    JinjaTemplateResolver,
    StubAdapter,
)

# Ensure local source package (src/action_client) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))


@dataclass
class Article:
    id: Optional[str]
    title: Optional[str]


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def base_url() -> str:
    return "https://example.com"


@pytest.fixture(autouse=True)
def clean_registry() -> Generator[None, None, None]:
    """Drop adapters registered or created by a test."""
    yield
    AdapterRegistry.clear()


@pytest.fixture
def stub_adapter() -> StubAdapter:
    adapter = StubAdapter()
    AdapterRegistry.register("stub", adapter)
    return adapter


@pytest.fixture
def templates() -> dict[str, str]:
    """Template sources by virtual path; tests add entries before building requests."""
    return {}


@pytest.fixture
def resolver(templates: dict[str, str]) -> JinjaTemplateResolver:
    # DictLoader keeps a reference, so templates declared later are found
    return JinjaTemplateResolver(DictLoader(templates))


@pytest.fixture
def base_client(
    base_url: str, resolver: JinjaTemplateResolver
) -> type[ActionClient]:
    class BaseClient(ActionClient):
        pass

    BaseClient.default(url=base_url, template_resolver=resolver, adapter="stub")
    return BaseClient


@pytest.fixture
def article() -> Any:
    return Article(id="1", title="Article Title")
