"""HTTP fetcher for catalog files."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from forge_installer.catalog import CatalogItem
from forge_installer.errors import FetchError

logger = logging.getLogger(__name__)


class Fetcher:
    """Plain GETs against the catalog base URL. No retries, no auth."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        user_agent: str = "forge-installer",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def url_for(self, item: CatalogItem) -> str:
        return f"{self.base_url}/{item.kind.subdir}/{quote(item.ident)}{item.kind.suffix}"

    def fetch(self, item: CatalogItem) -> bytes:
        url = self.url_for(item)
        logger.debug("fetching %s", url)
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as exc:
            kind, hint = classify_http_error(exc, self.base_url)
            raise FetchError(f"[{kind}] {exc}", kind=kind, url=url, hint=hint) from exc

        if resp.status_code >= 400:
            retryable = resp.status_code >= 500 or resp.status_code == 429
            hint = (
                f"{item.relative_path} does not exist in the catalog."
                if resp.status_code == 404
                else f"Server answered HTTP {resp.status_code}; try again later."
            )
            raise FetchError(
                f"HTTP {resp.status_code} for {url}",
                kind="http_status",
                url=url,
                hint=hint,
                retryable=retryable,
            )

        content = resp.content
        if not content:
            raise FetchError(
                f"empty response body for {url}",
                kind="empty_body",
                url=url,
                hint="The remote file is empty; nothing was written.",
                retryable=False,
            )
        return content


def classify_http_error(exc: Exception, base_url: str) -> tuple[str, str]:
    text = str(exc).lower()
    service_hint = f"Check that {base_url} is reachable from this machine."

    if isinstance(exc, httpx.TimeoutException):
        return (
            "timeout",
            f"Request timed out. {service_hint} Raise FORGE_HTTP_TIMEOUT_SECONDS if the link is slow.",
        )

    if isinstance(exc, httpx.ConnectError):
        dns_markers = (
            "temporary failure in name resolution",
            "name or service not known",
            "nodename nor servname provided",
            "getaddrinfo",
            "enotfound",
            "eai_again",
        )
        if any(marker in text for marker in dns_markers):
            return (
                "dns_resolution",
                f"DNS lookup failed for {base_url}. Verify network/DNS access in this environment.",
            )
        if "connection refused" in text or "actively refused" in text:
            return ("connection_refused", f"Server refused connection. {service_hint}")
        if "network is unreachable" in text or "no route to host" in text:
            return (
                "network_unreachable",
                "Network route is unavailable (possibly sandbox/egress restriction). "
                "Check proxy settings and host routing.",
            )
        return ("connect_error", f"Unable to establish TCP connection. {service_hint}")

    if isinstance(exc, httpx.NetworkError):
        return (
            "network_error",
            f"Network error while contacting {base_url}. Check network/proxy configuration.",
        )

    return ("unknown_error", f"Unexpected error. {service_hint}")
