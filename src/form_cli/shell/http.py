"""
HTTP access via httpx.

Shell layer: every network call a session makes (document fetches, policy
dispatch, prefix lookups) goes through one shared AsyncClient.
"""

import logging

import httpx

from ..errors import DocumentLoadError

logger = logging.getLogger(__name__)

DEFAULT_PREFIX_SERVICE = "https://prefix.cc/{prefix}.file.json"


class HttpTransport:
    """Async HTTP transport for fetching documents and dispatching payloads."""

    def __init__(
        self,
        timeout: float = 30.0,
        default_method: str = "POST",
        client: httpx.AsyncClient | None = None,
    ):
        self.default_method = default_method
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def fetch_text(self, url: str) -> str:
        """GET a document and return its body as text."""
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise DocumentLoadError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise DocumentLoadError(url, str(e) or type(e).__name__) from e
        return response.text

    async def send(
        self,
        url: str,
        body: str,
        content_type: str,
        method: str | None = None,
    ) -> httpx.Response:
        """
        Send a serialized payload.

        Transport errors propagate as httpx.HTTPError; status codes are left
        to the caller to judge.
        """
        method = (method or self.default_method).upper()
        logger.debug(f"{method} {url} ({content_type}, {len(body)} chars)")
        return await self._client.request(
            method,
            url,
            content=body.encode("utf-8"),
            headers={"Content-Type": content_type},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class PrefixCcResolver:
    """
    Resolves namespace prefixes to IRIs through a prefix.cc style service.

    The service answers `{prefix: namespace}` JSON for known prefixes and a
    non-success status otherwise.
    """

    def __init__(self, transport: HttpTransport, url_template: str = DEFAULT_PREFIX_SERVICE):
        self.transport = transport
        self.url_template = url_template
        self._cache: dict[str, str | None] = {}

    async def resolve(self, prefix: str) -> str | None:
        if prefix in self._cache:
            return self._cache[prefix]

        url = self.url_template.format(prefix=prefix)
        try:
            response = await self.transport.client.get(url)
        except httpx.HTTPError as e:
            # Not cached, so a later retry can still succeed
            logger.warning(f"Prefix lookup for '{prefix}' failed: {e}")
            return None

        namespace = None
        if response.is_success:
            try:
                payload = response.json()
            except ValueError:
                logger.warning(f"Prefix service returned invalid JSON for '{prefix}'")
            else:
                if isinstance(payload, dict):
                    namespace = payload.get(prefix)

        self._cache[prefix] = namespace
        return namespace
