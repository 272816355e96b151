from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter
from infrastructure.logging import get_module_logger
from infrastructure.models import ErrorResponse
from infrastructure.services import get_settings
from server.lifespan import lifespan
from server.middleware import RequestContextMiddleware

logger = get_module_logger()
settings = get_settings()

MISSING_FIELDS_MESSAGES = {
    "/api/send-confirmation": "Please provide name, email, and course",
}


async def validation_exception_handler(request: Request, exc: Exception):
    """Return 400 with the offending fields instead of FastAPI's default 422."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in errors
    ]
    missing = any(err.get("type") == "missing" for err in errors) or not errors
    if missing:
        error = "Missing required fields"
        message = MISSING_FIELDS_MESSAGES.get(
            request.url.path, "Please provide all required fields"
        )
    else:
        error = "Invalid request"
        message = "Please check the submitted fields and try again"

    logger.info("request_validation_failed", fields=[d["field"] for d in details])
    body = ErrorResponse(error=error, message=message, details=details)
    return JSONResponse(status_code=400, content=body.to_content())


async def unhandled_exception_handler(_request: Request, exc: Exception):
    logger.exception("unhandled_exception", error=str(exc))
    body = ErrorResponse(
        error="Internal Server Error",
        message="An error occurred",
        details=None if settings.is_production else str(exc),
    )
    return JSONResponse(status_code=500, content=body.to_content())


handler = FastAPI(title="EdCatalyst Form Relay", lifespan=lifespan)
setup_rate_limiter(handler)
handler.add_exception_handler(RequestValidationError, validation_exception_handler)
handler.add_exception_handler(Exception, unhandled_exception_handler)

handler.add_middleware(RequestContextMiddleware)
handler.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.allowed_origins,
    allow_credentials=settings.server.allowed_origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


handler.include_router(api_router)
