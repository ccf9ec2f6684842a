"""
HTTP client wrapper for the Macrostrat API and tile server.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from .catalog import GatewayConfig
from .errors import UpstreamError

logger = logging.getLogger(__name__)

QueryParams = Mapping[str, str] | Sequence[tuple[str, str]]


def format_query_value(value: Any) -> str:
    """
    Render a query parameter value the way the Macrostrat API expects it.

    Integral floats lose their trailing ``.0`` and booleans are lower-cased.

    Parameters
    ----------
    value : Any
        Value to render

    Returns
    -------
    str
        Query string representation
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class MacrostratClient:
    """Async wrapper for Macrostrat HTTP operations."""

    def __init__(
        self,
        config: GatewayConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.http = httpx.AsyncClient(
            timeout=config.http_timeout,
            headers={"User-Agent": config.user_agent},
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> "MacrostratClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    def endpoint(self, role: str, path: str = "") -> str:
        """
        Build an upstream URL from a root role and a sub-path.

        Parameters
        ----------
        role : str
            Logical root role (see ``GatewayConfig.roles``)
        path : str, optional
            Path appended to the root URI, starting with "/"

        Returns
        -------
        str
            Absolute URL
        """
        return f"{self.config.resolve_root(role)}{path}"

    async def _get(self, url: str, params: QueryParams | None = None) -> httpx.Response:
        logger.debug("GET %s params=%s", url, params)
        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as exc:
            raise UpstreamError(None, str(exc) or type(exc).__name__, url) from exc

        if not response.is_success:
            raise UpstreamError(response.status_code, response.reason_phrase, str(response.url))
        return response

    async def get_json(self, url: str, params: QueryParams | None = None) -> Any:
        """
        GET ``url`` and parse the JSON body.

        Parameters
        ----------
        url : str
            Absolute URL
        params : mapping or sequence of pairs, optional
            Query parameters

        Returns
        -------
        Any
            Parsed JSON body

        Raises
        ------
        UpstreamError
            On a non-2xx status, a transport failure, or a body that is not JSON
        """
        return self._decode(await self._get(url, params))

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                response.status_code, f"invalid JSON body ({exc})", str(response.url)
            ) from exc

    async def get_data(self, url: str, params: QueryParams | None = None) -> tuple[list, dict]:
        """
        GET an enveloped endpoint and unwrap ``success.data`` and ``success.refs``.

        Parameters
        ----------
        url : str
            Absolute URL
        params : mapping or sequence of pairs, optional
            Query parameters

        Returns
        -------
        tuple[list, dict]
            The data array and the refs mapping (empty when absent)

        Raises
        ------
        UpstreamError
            If the request fails or the body carries no ``success.data``
        """
        response = await self._get(url, params)
        body = self._decode(response)
        success = body.get("success") if isinstance(body, dict) else None
        if not isinstance(success, dict) or not isinstance(success.get("data"), list):
            detail = body.get("error") if isinstance(body, dict) else None
            message = (
                detail.get("message")
                if isinstance(detail, dict)
                else "response has no success.data"
            )
            raise UpstreamError(response.status_code, str(message), str(response.url))
        return success["data"], success.get("refs") or {}

    async def get_bytes(self, url: str) -> bytes:
        """
        GET ``url`` and return the raw body.

        Raises
        ------
        UpstreamError
            On a non-2xx status or a transport failure
        """
        response = await self._get(url)
        return response.content
