import asyncio
from datetime import datetime
import json
import logging
from typing import Any, Dict, List, Optional

import aiohttp
import backoff

from run_import.config import Settings
from run_import.exceptions import ExternalLogError, ExternalLookupError
from run_import.metrics import GRAPHJSON_REQUEST_TIME
from run_import.models import Sample

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)


def is_client_error(e: Exception) -> bool:
    """4xx responses will not succeed on a retry."""
    return isinstance(e, aiohttp.ClientResponseError) and e.status < 500


class GraphJSONClient:
    """GraphJSONClient talks to the GraphJSON logging API.

    It exposes the two operations the importer needs: querying the samples
    already logged to a collection within a time window, and logging a single
    event to a collection.
    Attributes:
        api_key (str): GraphJSON API key sent with every request
        base_url (str): Base URL of the GraphJSON API
        time_zone (str): IANA time zone sent with sample queries
        max_retries (int): Attempts made for a sample query before giving up
        _session (aiohttp.ClientSession): Async HTTP session, created lazily
    Example:
        ```python
        async with GraphJSONClient(settings) as client:
            samples = await client.get_samples("runs", start, end)
            await client.log_event("runs", 1633782798, {"distance_km": 8.16})
        ```
    Every request is bounded by GRAPHJSON_TIMEOUT_SECONDS. Sample queries are
    retried with exponential backoff and then raise ExternalLookupError, so a
    failed lookup is never mistaken for an empty collection. Log calls are
    not retried and raise ExternalLogError.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.GRAPHJSON_API_KEY
        self.base_url = settings.GRAPHJSON_API_BASE_URL.rstrip("/")
        self.time_zone = settings.GRAPHJSON_TIME_ZONE
        self.max_retries = settings.MAX_RETRIES
        self.timeout = aiohttp.ClientTimeout(total=settings.GRAPHJSON_TIMEOUT_SECONDS)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    async def session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def _post(self, path: str, payload: Dict[str, Any]) -> str:
        session = await self.session
        async with session.post(f"{self.base_url}/{path}", json=payload) as response:
            response.raise_for_status()
            return await response.text()

    async def get_samples(self, collection: str, start: datetime, end: datetime) -> List[Sample]:
        """
        Fetch the samples logged to a collection between two instants.

        Args:
            collection (str): The collection to query.
            start (datetime): Start of the window, timezone aware.
            end (datetime): End of the window, timezone aware.

        Returns:
            List[Sample]: Logged samples, in no particular order.

        Raises:
            ExternalLookupError: If the query fails after retries or the response is malformed.
        """
        payload = {
            "api_key": self.api_key,
            "collection": collection,
            "IANA_time_zone": self.time_zone,
            "graph_type": "Samples",
            "start": start.isoformat(timespec="milliseconds"),
            "end": end.isoformat(timespec="milliseconds"),
            "filters": [],
        }
        query = backoff.on_exception(
            backoff.expo,
            RETRYABLE_ERRORS,
            max_tries=self.max_retries,
            giveup=is_client_error,
            logger=logger,
        )(self._post)

        try:
            with GRAPHJSON_REQUEST_TIME.labels("samples").time():
                body = await query("visualize/data", payload)
        except RETRYABLE_ERRORS as e:
            raise ExternalLookupError(f"Sample query for {collection} failed: {e!r}") from e

        try:
            return [Sample.model_validate(sample) for sample in json.loads(body)["result"]]
        except (KeyError, TypeError, ValueError) as e:
            raise ExternalLookupError(f"Unexpected sample response for {collection}: {e!r}") from e

    async def log_event(self, collection: str, timestamp: int, event: Dict[str, Any]) -> None:
        payload = {
            "api_key": self.api_key,
            "collection": collection,
            "json": json.dumps(event),
            "timestamp": timestamp,
        }
        try:
            with GRAPHJSON_REQUEST_TIME.labels("log").time():
                await self._post("log", payload)
        except RETRYABLE_ERRORS as e:
            raise ExternalLogError(f"Logging event {timestamp} to {collection} failed: {e!r}") from e
