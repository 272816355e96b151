import time

from starlette.middleware.base import BaseHTTPMiddleware

from infrastructure.logging import bind_request_context, get_module_logger

logger = get_module_logger()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a correlation id and request details to every log line of a request."""

    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        with bind_request_context(
            correlation_id=request.headers.get("X-Correlation-ID"),
            request_path=request.url.path,
            request_method=request.method,
            client_ip=request.client.host if request.client else None,
        ) as correlation_id:
            response = await call_next(request)
            response.headers["X-Correlation-ID"] = correlation_id
            logger.info(
                "request_completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
                origin=request.headers.get("origin"),
            )
            return response
