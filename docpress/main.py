import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from docpress.config import get_settings
from docpress.logging_config import configure_logging
from docpress.routers.extract import limiter, router as extract_router
from docpress.routers.publish import router as publish_router

_settings = get_settings()
configure_logging(_settings.ERROR_LOG_FILE, _settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="docpress – Draft Publishing API",
    description="Turns .docx author drafts into clean, publishable blog posts.",
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(extract_router)
app.include_router(publish_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from docpress"}
