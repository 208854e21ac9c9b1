"""Resource loading: turn a catalog URI into text.

Supported forms:
    - ``file:///abs/path``, ``file:relative/path`` and bare paths (``~`` expanded)
    - ``classpath://<package>/<path/in/package>`` via :mod:`importlib.resources`
    - ``http://`` and ``https://`` via :mod:`httpx`
    - any scheme registered with :meth:`ResourceLoader.register_scheme`

Every failure is reported as :class:`ContentFetchError` chained to its cause,
so callers only ever need to handle one exception type for I/O problems.
"""

from collections.abc import Callable
from importlib import resources as importlib_resources
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx

from catalog_bootstrap.base.errors import ContentFetchError, propagate_if_fatal
from catalog_bootstrap.utils.logger import get_logger

logger = get_logger("resources")

DEFAULT_HTTP_TIMEOUT = 30.0
HTTP_TIMEOUT_KEY = "resources.http_timeout"

SchemeHandler = Callable[[str], str]


class ResourceLoader:
    """Fetch the textual content of catalog URIs."""

    def __init__(self, timeout: float = DEFAULT_HTTP_TIMEOUT, encoding: str = "utf-8"):
        self.timeout = timeout
        self.encoding = encoding
        self._handlers: dict[str, SchemeHandler] = {}

    @classmethod
    def from_config(cls, config) -> "ResourceLoader":
        """Create a loader using ``resources.http_timeout`` from ``config``."""
        return cls(timeout=float(config.get(HTTP_TIMEOUT_KEY, DEFAULT_HTTP_TIMEOUT)))

    def register_scheme(self, scheme: str, handler: SchemeHandler) -> None:
        """Route URIs with ``scheme`` to ``handler(uri) -> text``.

        Registered handlers take precedence over the built-in schemes.
        """
        self._handlers[scheme.lower()] = handler

    def get_resource_as_string(self, url: str) -> str:
        """Return the content at ``url`` as text.

        Raises:
            ContentFetchError: If the resource cannot be read for any reason
        """
        if not url or not url.strip():
            raise ContentFetchError(url, "Resource URI must not be blank")

        scheme = urlparse(url).scheme.lower()
        logger.debug(f"Fetching resource {url}")

        try:
            if scheme in self._handlers:
                return self._handlers[scheme](url)
            if scheme in ("http", "https"):
                return self._read_http(url)
            if scheme == "classpath":
                return self._read_classpath(url)
            if scheme == "file" or not scheme or len(scheme) == 1:
                # single-letter scheme is a Windows drive letter
                return self._read_file(url)
        except ContentFetchError:
            raise
        except Exception as e:
            propagate_if_fatal(e)
            raise ContentFetchError(url, f"Unable to load resource '{url}': {e}") from e

        raise ContentFetchError(url, f"Unsupported URI scheme '{scheme}' in '{url}'")

    def _read_file(self, url: str) -> str:
        parsed = urlparse(url)
        if parsed.scheme.lower() == "file":
            if parsed.netloc or parsed.path.startswith("/"):
                path = Path(url2pathname(unquote(parsed.path)))
            else:
                path = Path(unquote(url[len("file:"):]))
        else:
            path = Path(url)
        return path.expanduser().read_text(encoding=self.encoding)

    def _read_classpath(self, url: str) -> str:
        parsed = urlparse(url)
        package = parsed.netloc
        relative = parsed.path.lstrip("/")
        if not package or not relative:
            raise ContentFetchError(url, f"Classpath URI must name a package and a path: '{url}'")
        resource = importlib_resources.files(package).joinpath(relative)
        return resource.read_text(encoding=self.encoding)

    def _read_http(self, url: str) -> str:
        response = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        response.raise_for_status()
        return response.text
