import time
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Define metrics (names follow Prometheus conventions)
REQ_COUNT = Counter("forecast_http_requests_total", "Total HTTP requests", ["path","method","code"])
REQ_LATENCY = Histogram("forecast_http_request_duration_seconds", "Request latency", ["path","method"])

def _path_label(request: Request) -> str:
    # Route template keeps label cardinality bounded (query strings carry the address)
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path

class PromMiddleware(BaseHTTPMiddleware):
    """
    Measures latency and counts requests.
    """
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = time.perf_counter() - start

        path = _path_label(request)
        method = request.method
        code = str(response.status_code)

        REQ_COUNT.labels(path=path, method=method, code=code).inc()
        REQ_LATENCY.labels(path=path, method=method).observe(elapsed)
        return response

async def metrics_endpoint(request: Request):
    """
    GET /v1/metrics — scraped by Prometheus.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
