import logging
import time
from typing import Dict, Optional

import httpx
from fastapi import Request, Response
from prometheus_client import CONTENT_TYPE_LATEST

from abstractions.module_registry import ModuleRegistry
from config.config import Config
from contracts.probe_config import ProbeConfiguration
from contracts.probe_outcome import ProbeOutcome
from core.errors import ProbeError, TransportFailure, UnsupportedMethod
from core.metrics_manager import MetricsManager
from core.metrics_renderer import render_metrics
from core.param_parser import parse_params
from core.request_builder import OutboundRequest, build_request
from core.response_validator import validate_response

logger = logging.getLogger(__name__)


def parse_content_length(headers: httpx.Headers) -> int:
    """Return the content-length header as an int, or -1 if absent or unparsable."""
    value = headers.get("content-length")
    if value is None:
        return -1
    try:
        length = int(value)
    except ValueError:
        return -1
    return length if length >= 0 else -1


def error_response(error: ProbeError) -> Response:
    return Response(
        content=f"error: {error.message}\n", status_code=400, media_type="text/plain"
    )


class ProbeHandler:
    """
    Handler for probe requests: resolves the module, probes the target and
    renders the outcome as metrics.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        module_registry: ModuleRegistry,
        metrics_manager: Optional[MetricsManager] = None,
    ):
        self.client = client
        self.module_registry = module_registry
        self.metrics_manager = metrics_manager

    async def handle_probe(self, request: Request) -> Response:
        """
        Handle an inbound probe request.

        Args:
            request (Request): The incoming FastAPI request object.

        Returns:
            Response: 200 with exposition text, or 400 with ``error: <message>``
            for malformed requests and rejected targets.
        """
        if request.method != "GET":
            logger.warning(f"Rejecting {request.method} probe request")
            return error_response(UnsupportedMethod(request.method))

        try:
            params = parse_params(request.query_params)
            raw_module = self.module_registry.resolve(params.module)
            config = ProbeConfiguration.from_module(raw_module)
            outcome = await self.run_probe(
                config, params.target, labels=self.probe_labels(request)
            )
        except ProbeError as e:
            logger.warning(f"Rejecting probe request: {e.message}")
            return error_response(e)

        if self.metrics_manager:
            self.metrics_manager.record_probe(params.module, outcome.success)
        return Response(content=render_metrics(outcome), media_type=CONTENT_TYPE_LATEST)

    async def run_probe(
        self,
        config: ProbeConfiguration,
        target: str,
        labels: Optional[Dict[str, str]] = None,
    ) -> ProbeOutcome:
        """
        Probe a target once under the given configuration.

        The request is built and checked before any network I/O. The measured
        duration covers the full body transfer. A transport failure is reported
        as a failed outcome rather than raised.

        Raises:
            ProbeError: If the request cannot be built for this target.
        """
        labels = labels or {}
        outbound = build_request(config, target)
        logger.info(f"Probing {target} with {config.method.value}")

        start = time.monotonic()
        try:
            response = await self._fetch(outbound)
        except TransportFailure as e:
            elapsed = time.monotonic() - start
            logger.warning(e.message)
            return ProbeOutcome(success=False, duration_seconds=elapsed, labels=labels)
        body = response.text
        elapsed = time.monotonic() - start

        success = await validate_response(config, response, body)
        logger.info(
            f"Probe of {target} finished: success={success}, status={response.status_code}, "
            f"duration={elapsed:.4f}s"
        )
        return ProbeOutcome(
            success=success,
            duration_seconds=elapsed,
            http_status_code=response.status_code,
            redirected=bool(response.history),
            content_length=parse_content_length(response.headers),
            labels=labels,
        )

    async def _fetch(self, outbound: OutboundRequest) -> httpx.Response:
        # Requests built outside the client do not carry its timeout
        outbound.request.extensions.setdefault("timeout", self.client.timeout.as_dict())
        try:
            return await self.client.send(
                outbound.request, follow_redirects=outbound.follow_redirects
            )
        except httpx.RequestError as e:
            raise TransportFailure(str(outbound.request.url), e) from e

    def probe_labels(self, request: Request) -> Dict[str, str]:
        """
        Collect provenance labels for the rendered metrics. Missing values are left out.
        """
        labels = {}
        origin = getattr(Config, "PROBE_ORIGIN", None) or self._colo_from_ray(
            request.headers.get("cf-ray")
        )
        if origin:
            labels["origin"] = origin

        country_header = getattr(Config, "CALLER_COUNTRY_HEADER", None)
        if country_header and request.headers.get(country_header):
            labels["caller_country"] = request.headers[country_header]

        network_header = getattr(Config, "CALLER_NETWORK_HEADER", None)
        if network_header and request.headers.get(network_header):
            labels["caller_network"] = request.headers[network_header]
        return labels

    @staticmethod
    def _colo_from_ray(ray: Optional[str]) -> Optional[str]:
        # cf-ray looks like "8f1a2b3c4d5e6f70-SJC"
        if not ray or "-" not in ray:
            return None
        return ray.rsplit("-", 1)[1] or None
