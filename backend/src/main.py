"""
Main server entrypoint.
Initializes the FastAPI application and includes the API routers.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from backend.src.api import decorations, fish, players, sync, tanks
from backend.src.core.errors import ServiceError
from backend.src.core.logging_config import setup_logging, get_logger
from backend.src.core.metrics import init_metrics, get_metrics, get_metrics_content_type, metrics
from backend.src.core.onchain import close_onchain_client

# Initialize logging and metrics as early as possible
setup_logging()
init_metrics()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Aquarium backend starting up", extra={"version": "0.1.0"})
    yield
    await close_onchain_client()
    logger.info("Aquarium backend shutting down")


app_description = """
Backend mediating between the off-chain store (player, tank and fish
metadata) and the on-chain ledger (ownership, genetics, capacity).

## Features
- **Players**: registration and the one-time starter pack.
- **Tanks**: capacity admission checks against the on-chain capacity.
- **Fish**: reads merged with on-chain progress, and family trees built from
  the parent pointers.
- **Decorations**: reads merged with the on-chain XP multiplier.
- **Sync queue**: confirmation tracking for submitted transactions.
"""

app = FastAPI(
    title="Aquarium Backend", description=app_description, version="0.1.0", lifespan=lifespan
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Map the service error taxonomy onto status codes."""
    metrics.track_error(request.url.path.split("/")[1] or "root", exc.error_code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/metrics", summary="Prometheus metrics endpoint", tags=["Monitoring"])
def get_metrics_endpoint():
    """
    Prometheus metrics endpoint.
    """
    logger.debug("Metrics endpoint accessed")
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


@app.get("/", summary="Health check endpoint", tags=["Status"])
def read_root():
    """Root endpoint for health checks."""
    logger.debug("Health check endpoint accessed")
    return {"status": "ok"}


@app.get("/version", summary="Get server version", tags=["Status"])
def read_version():
    """Returns the current version of the server application."""
    return {"version": "0.1.0"}


# Include API routers
app.include_router(players.router, prefix="/players", tags=["Players"])
app.include_router(tanks.router, prefix="/tanks", tags=["Tanks"])
app.include_router(fish.router, prefix="/fish", tags=["Fish"])
app.include_router(decorations.router, prefix="/decorations", tags=["Decorations"])
app.include_router(sync.router, prefix="/sync", tags=["Sync Queue"])
