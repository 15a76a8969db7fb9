import logging
import secrets
from typing import List, Optional, Sequence, Union

from run_import.config import Settings
from run_import.dedupe import deduplicate
from run_import.exceptions import (
    AuthorizationError,
    BatchParseError,
    ExternalLogError,
    InvalidRowError,
)
from run_import.existing import ExistingRecordIndex
from run_import.graphjson import GraphJSONClient
from run_import.metrics import ACTIVE_IMPORTS, EVENTS_LOGGED_TOTAL
from run_import.models import (
    RUNNING,
    Activity,
    EventDelivery,
    EventKind,
    ImportResult,
    ZoneRecord,
)
from run_import.normalize import to_activity
from run_import.parsing import parse_rows
from run_import.zones import to_zone_records

logger = logging.getLogger(__name__)


class ImportPipeline:
    """ImportPipeline turns a Health Export CSV into GraphJSON events.

    Stages run strictly in order: authenticate, parse, keep running
    activities, deduplicate, look up existing timestamps, normalise, skip
    already logged runs, expand heart rate zones, emit.
    Attributes:
        settings (Settings): Configuration, read once at startup
        client (GraphJSONClient): Client used for the lookup and for logging events
        index (ExistingRecordIndex): Lookup of timestamps already in the runs collection
    Notes:
        - Parse errors fail the whole batch, nothing is emitted
        - A failed existence lookup fails the whole batch, nothing is emitted
        - Rows whose values make derivation undefined are skipped and counted
        - Events are logged one at a time in source order; a failed log call is
          recorded and the batch carries on
    """

    def __init__(self, settings: Settings, client: GraphJSONClient):
        self.settings = settings
        self.client = client
        self.index = ExistingRecordIndex(client, settings.GRAPHJSON_COLLECTION_RUNS)

    def authenticate(self, api_key: Optional[str]) -> None:
        if api_key is None or not secrets.compare_digest(
            api_key.encode(), self.settings.IMPORT_API_KEY.encode()
        ):
            raise AuthorizationError("Missing or incorrect api-key header")

    async def run(self, csv_data: str, api_key: Optional[str]) -> ImportResult:
        self.authenticate(api_key)
        return await self.import_csv(csv_data)

    async def import_csv(self, csv_data: str) -> ImportResult:
        """
        Import every new run in a Health Export CSV.

        Args:
            csv_data (str): CSV text including the header row

        Returns:
            ImportResult: Counts of what was logged, skipped and failed

        Raises:
            BatchParseError: If any row fails to parse.
            ExternalLookupError: If the existing timestamps could not be fetched.
        """
        ACTIVE_IMPORTS.inc()
        try:
            rows, errors = parse_rows(csv_data)
            if errors:
                raise BatchParseError(errors)

            runs = deduplicate(row for row in rows if row.activity == RUNNING)
            logger.info(f"{len(runs)} runs after deduplication, from {len(rows)} rows")

            existing = await self.index.lookup(runs)

            activities: List[Activity] = []
            invalid = 0
            skipped = 0
            for row in runs:
                try:
                    activity = to_activity(
                        row,
                        self.settings.GRAPHJSON_COLLECTION_RUNS,
                        self.settings.score_bounds,
                    )
                except InvalidRowError as e:
                    logger.warning(f"Skipping invalid row on line {row.line_number}: {str(e)}")
                    invalid += 1
                    continue

                if activity.timestamp in existing:
                    skipped += 1
                    continue
                activities.append(activity)

            deliveries = await self.emit(activities)
            delivered = sum(1 for d in deliveries if d.delivered)

            result = ImportResult(
                logged_count=delivered,
                filtered_timestamps_count=len(existing),
                processed_count=len(runs),
                skipped_existing_count=skipped,
                invalid_row_count=invalid,
                failed_count=len(deliveries) - delivered,
            )
            logger.info(
                f"Import finished: {result.logged_count} events logged, "
                f"{result.skipped_existing_count} runs already logged, "
                f"{result.failed_count} events failed"
            )
            return result
        finally:
            ACTIVE_IMPORTS.dec()

    async def emit(self, activities: Sequence[Activity]) -> List[EventDelivery]:
        """Log each activity followed by its zone records, sequentially."""
        deliveries = []
        for activity in activities:
            zones = to_zone_records(activity, self.settings.GRAPHJSON_COLLECTION_ZONES)
            deliveries.append(await self._deliver(EventKind.ACTIVITY, activity))
            for zone in zones:
                deliveries.append(await self._deliver(EventKind.ZONE, zone))
        return deliveries

    async def _deliver(self, kind: EventKind, event: Union[Activity, ZoneRecord]) -> EventDelivery:
        try:
            await self.client.log_event(event.collection, event.timestamp, event.model_dump())
        except ExternalLogError as e:
            logger.error(f"Failed to log {kind.value} event {event.timestamp}: {str(e)}")
            EVENTS_LOGGED_TOTAL.labels(collection=event.collection, status="failed").inc()
            return EventDelivery(
                kind=kind,
                collection=event.collection,
                timestamp=event.timestamp,
                delivered=False,
                error_message=str(e),
            )

        EVENTS_LOGGED_TOTAL.labels(collection=event.collection, status="logged").inc()
        return EventDelivery(
            kind=kind,
            collection=event.collection,
            timestamp=event.timestamp,
            delivered=True,
        )
