import logging
from typing import Sequence, Set

from run_import.graphjson import GraphJSONClient
from run_import.models import HealthExportRow
from run_import.timestamps import day_end, day_start

logger = logging.getLogger(__name__)


class ExistingRecordIndex:
    """Timestamps already logged to the runs collection, used to make imports idempotent."""

    def __init__(self, client: GraphJSONClient, collection: str):
        self.client = client
        self.collection = collection

    async def lookup(self, rows: Sequence[HealthExportRow]) -> Set[int]:
        """
        Get the timestamps already logged for the days covered by a batch.

        The window runs from the start of the earliest row's day to the end of
        the latest row's day, in UTC. Lookup failures propagate as
        ExternalLookupError rather than being read as "nothing logged".

        Args:
            rows (Sequence[HealthExportRow]): The incoming batch

        Returns:
            Set[int]: Logged timestamps, empty without a request if the batch is empty
        """
        if not rows:
            return set()

        timestamps = [row.timestamp for row in rows]
        start = day_start(min(timestamps))
        end = day_end(max(timestamps))

        samples = await self.client.get_samples(self.collection, start, end)
        existing = {sample.timestamp for sample in samples}
        logger.info(
            f"Found {len(existing)} existing timestamps in {self.collection} "
            f"between {start.date()} and {end.date()}"
        )
        return existing
