"""
SuperVia HTTP API client.
Covers the station list, the trip planner and the alerts feed.
"""

import logging
import httpx
from typing import Optional, Dict, Any

logger = logging.getLogger(__name__)

CONTENT_URL = "https://content.supervia.com.br"
SITE_URL = "https://www.supervia.com.br"

# Fields requested from the alerts feed
_ALERT_FIELDS = [
    "nid",
    "title",
    "field_alerta_ramais",
    "field_alerta_estacao",
    "field_alerta_descricao",
    "field_alerta_data",
    "field_alerta_link",
]


class ViaError(Exception):
    """Base class for errors that abort a planning run."""
    pass


class SuperviaAPIError(ViaError):
    """SuperVia API error."""
    def __init__(self, message: str, status_code: Optional[int]):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(SuperviaAPIError):
    """Request never produced a response."""
    def __init__(self, message: str):
        super().__init__(message, None)


class BadStatusError(SuperviaAPIError):
    """Response status other than 200."""
    def __init__(self, status_code: int, body: str):
        super().__init__(f"status: {status_code}\nbody: {body}", status_code)
        self.body = body


class MalformedResponseError(SuperviaAPIError):
    """Response JSON does not have the expected shape."""
    def __init__(self, message: str):
        super().__init__(message, None)


class SuperviaClient:
    """
    SuperVia API client.

    Calls are blocking and sequential. No authentication is involved.
    """

    def __init__(
        self,
        content_url: str = CONTENT_URL,
        site_url: str = SITE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize SuperVia client.

        Args:
            content_url: Base URL serving stations and trip plans
            site_url: Base URL serving the alerts feed
            timeout: Request timeout in seconds (httpx default when None)
            transport: Optional httpx transport, used by tests
        """
        self.content_url = content_url.rstrip("/")
        self.site_url = site_url.rstrip("/")

        kwargs: Dict[str, Any] = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if transport is not None:
            kwargs["transport"] = transport
        self.client = httpx.Client(**kwargs)

    def close(self):
        """Close HTTP client."""
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _fetch(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Fetch JSON from the SuperVia API.

        Args:
            url: Endpoint URL
            params: Optional query parameters

        Returns:
            Parsed JSON response

        Raises:
            NetworkError: When the request fails before a response arrives
            BadStatusError: On any status other than 200
            SuperviaAPIError: When the body is not JSON
        """
        logger.debug("GET %s", url, extra={"params": params})

        try:
            response = self.client.get(url, params=params)
        except httpx.RequestError as e:
            raise NetworkError(f"Request error: {str(e)}")

        if response.status_code != httpx.codes.OK:
            raise BadStatusError(response.status_code, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise SuperviaAPIError(f"Invalid JSON from {url}: {str(e)}", response.status_code)

    def get_stations(self) -> Dict[str, Any]:
        """
        Get the full station list.

        Returns:
            Raw response with an "estacoes" list
        """
        return self._fetch(f"{self.content_url}/estacoes")

    def get_trip_plan(self, origin_id: str, dest_id: str, date: str, time: str) -> Dict[str, Any]:
        """
        Get trip options between two stations.

        Args:
            origin_id: Canonical origin station id
            dest_id: Canonical destination station id
            date: Travel date as YYYY-MM-DD
            time: Travel time as HH:MM

        Returns:
            Raw response with a "trajetos" list
        """
        url = f"{self.content_url}/planeje/{origin_id}/{dest_id}/{date}/{time}"
        return self._fetch(url)

    def get_alerts(self, origin_id: str, dest_id: str, date: str, time: str) -> Any:
        """
        Get service alerts for a route at a given time.

        Args:
            origin_id: Canonical origin station id
            dest_id: Canonical destination station id
            date: Travel date as YYYY-MM-DD
            time: Travel time as HH:MM

        Returns:
            Raw alerts list
        """
        params = {
            "type": "alerta",
            "fields": ",".join(_ALERT_FIELDS),
            "partida": origin_id,
            "chegada": dest_id,
            "data": date,
            "hora": time,
        }
        return self._fetch(f"{self.site_url}/pt-br/api/alertas", params)
