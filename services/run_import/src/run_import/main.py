import argparse
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import Depends, FastAPI, Form, Header, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app
import uvicorn

from run_import.config import get_settings
from run_import.exceptions import AuthorizationError, BatchParseError, ExternalLookupError
from run_import.graphjson import GraphJSONClient
from run_import.metrics import IMPORT_REQUESTS_TOTAL
from run_import.models import ImportResult
from run_import.pipeline import ImportPipeline

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application."""
    logger.info("Starting run import service...")
    yield
    await app.state.graphjson_client.close()
    logger.info("Closed GraphJSON session")


def create_app(graphjson_client: Optional[GraphJSONClient] = None) -> FastAPI:
    settings = get_settings()

    app = FastAPI(title="Run Import Service", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add Prometheus metrics endpoint
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    if graphjson_client is None:
        graphjson_client = GraphJSONClient(settings)
    app.state.graphjson_client = graphjson_client
    pipeline = ImportPipeline(settings, graphjson_client)

    def verify_api_key(api_key: Optional[str] = Header(default=None)) -> None:
        # Solved before the form fields are validated
        try:
            pipeline.authenticate(api_key)
        except AuthorizationError as e:
            IMPORT_REQUESTS_TOTAL.labels(status="unauthorized").inc()
            raise HTTPException(status_code=401, detail=str(e))

    @app.post("/import", response_model=ImportResult, dependencies=[Depends(verify_api_key)])
    async def import_csv(csv_data: str = Form(..., alias="csvData")) -> ImportResult:
        """Import a Health Export CSV, logging every new run to GraphJSON.

        Only counts are returned, never the imported health data.
        """
        try:
            result = await pipeline.import_csv(csv_data)
        except BatchParseError as e:
            IMPORT_REQUESTS_TOTAL.labels(status="invalid").inc()
            raise HTTPException(
                status_code=400,
                detail=[error.model_dump() for error in e.errors],
            )
        except ExternalLookupError as e:
            IMPORT_REQUESTS_TOTAL.labels(status="failed").inc()
            logger.error(f"Existing timestamp lookup failed: {str(e)}")
            raise HTTPException(status_code=502, detail="Could not check for existing runs")
        except Exception as e:
            IMPORT_REQUESTS_TOTAL.labels(status="failed").inc()
            logger.error(f"Unexpected error in import_csv: {str(e)}")
            raise HTTPException(status_code=500, detail="Internal server error") from e

        IMPORT_REQUESTS_TOTAL.labels(status="completed").inc()
        return result

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Run the run import API")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to run the server on")
    parser.add_argument("--port", type=int, default=8000, help="Port to run the server on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", type=str, default="info", help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    uvicorn.run(
        "run_import.main:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
