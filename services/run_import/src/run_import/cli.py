import argparse
import asyncio
import logging
from pathlib import Path
import sys

from run_import.config import get_settings
from run_import.exceptions import BatchParseError, ExternalLookupError
from run_import.graphjson import GraphJSONClient
from run_import.models import ImportResult
from run_import.pipeline import ImportPipeline

logger = logging.getLogger(__name__)


async def import_file(path: Path) -> ImportResult:
    settings = get_settings()
    csv_data = path.read_text(encoding="utf-8")
    async with GraphJSONClient(settings) as client:
        return await ImportPipeline(settings, client).import_csv(csv_data)


def main(argv=None) -> int:
    """Import a Health Export CSV file from disk."""
    parser = argparse.ArgumentParser(description="Import a Health Export CSV into GraphJSON")
    parser.add_argument("path", type=Path, help="Path to the exported CSV file")
    parser.add_argument("--log-level", type=str, default=None, help="Logging level")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or get_settings().LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        result = asyncio.run(import_file(args.path))
    except BatchParseError as e:
        for error in e.errors:
            logger.error(f"Line {error.row}: {error.message}")
        return 1
    except ExternalLookupError as e:
        logger.error(f"Could not check for existing runs: {str(e)}")
        return 1

    print(result.model_dump_json(by_alias=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
