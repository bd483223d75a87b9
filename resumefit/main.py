import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from resumefit.api.v1.analysis import router as analysis_router
from resumefit.api.v1.health import router as health_router
from resumefit.core.errors import AIInvocationError, EngineError, InputValidationError, OutputParseError
from resumefit.core.logging_config import configure_logging
from resumefit.core.rate_limit import limiter

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="ResumeFit Analysis API", version="0.1.0")

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


def status_code_for(exc: EngineError) -> int:
    if isinstance(exc, InputValidationError):
        return 422
    if isinstance(exc, OutputParseError):
        return 502
    if isinstance(exc, AIInvocationError):
        return 429 if exc.type == "rate_limit" else 503
    return 500


@app.exception_handler(EngineError)
async def engine_error_handler(request: Request, exc: EngineError):
    status_code = status_code_for(exc)
    logger.warning(
        "engine_error path=%s code=%s status=%s detail=%s",
        request.url.path,
        exc.code,
        status_code,
        exc.detail,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.to_dict()})


app.include_router(health_router, prefix="/v1", tags=["Health"])
app.include_router(analysis_router, prefix="/v1", tags=["Analysis"])
