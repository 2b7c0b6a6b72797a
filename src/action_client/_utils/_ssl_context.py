"""TLS settings for the httpx adapter.

The system trust store is used when ``truststore`` is installed. Otherwise the
certifi bundle is used, unless ``SSL_CERT_FILE`` or ``REQUESTS_CA_BUNDLE``
names another CA file. ``SSL_CERT_DIR`` adds a directory of CA certificates.
"""

import os
import ssl
from typing import Any, Optional

CA_FILE_VARIABLES = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")
CA_DIR_VARIABLE = "SSL_CERT_DIR"


def _env_path(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if not value:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def ca_locations() -> tuple[Optional[str], Optional[str]]:
    """The ``(cafile, capath)`` pair configured through the environment."""
    cafile = next(
        (path for path in map(_env_path, CA_FILE_VARIABLES) if path), None
    )
    return cafile, _env_path(CA_DIR_VARIABLE)


def create_ssl_context() -> ssl.SSLContext:
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        import certifi

        cafile, capath = ca_locations()
        return ssl.create_default_context(
            cafile=cafile or certifi.where(), capath=capath
        )


def get_httpx_client_kwargs(
    timeout: Optional[float] = None, follow_redirects: bool = True
) -> dict[str, Any]:
    """Keyword arguments for the ``httpx.Client`` an adapter creates."""
    kwargs: dict[str, Any] = {
        "verify": create_ssl_context(),
        "follow_redirects": follow_redirects,
    }
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs
