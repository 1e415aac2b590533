from fastapi import FastAPI
from fastapi.responses import Response

from api.routes.analyze import router as analyze_router
from infrastructure.metrics import get_metrics_response

app = FastAPI(title="Instrument Detector")

app.include_router(analyze_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Return a simple liveness check."""
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns metrics in Prometheus text exposition format.
    Returns empty response if prometheus_client is not installed.
    """
    body, content_type = get_metrics_response()
    return Response(content=body, media_type=content_type)
