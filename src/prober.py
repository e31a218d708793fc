import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import ORJSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from config.config import VERSION, Config
from config.logging_config import setup_logging
from core.metrics_manager import MetricsManager
from core.probe_handler import ProbeHandler
from core.registry_factory import get_default_registry

setup_logging()
logger = logging.getLogger(__name__)

# Methods routed to the probe endpoint; everything but GET is answered with 400
PROBE_ROUTE_METHODS = [
    "GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "TRACE", "CONNECT"
]

module_registry = get_default_registry()
metrics_manager = MetricsManager()
client = httpx.AsyncClient(timeout=Config.PROBE_TIMEOUT_SECONDS)
probe_handler = ProbeHandler(client, module_registry, metrics_manager=metrics_manager)


@asynccontextmanager
async def lifespan(app):
    yield
    await client.aclose()


app = FastAPI(
    title="edge-prober",
    version=VERSION,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)
app.middleware("http")(metrics_manager.prometheus_middleware)


@app.api_route(Config.PROBE_PATH, methods=PROBE_ROUTE_METHODS)
async def probe(request: Request):
    logger.info(f"Probe requested: {request.url.query}")
    return await probe_handler.handle_probe(request)


@app.get("/modules")
async def list_modules():
    return {"modules": module_registry.list_modules()}


@app.get("/metrics")
def metrics():
    return Response(generate_latest(metrics_manager.registry), media_type=CONTENT_TYPE_LATEST)


logger.info(f"Prober loaded, serving probes on {Config.PROBE_PATH}")
