import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .core.config import settings
from .core.logging_utils import configure_logging, new_request_id, reset_request_id, set_request_id
from .db.session import close_db, init_db
from .api.v1 import health, tasks

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("Database is unreachable, check DATABASE_URL")
        raise
    logger.info("%s %s started env=%s", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    yield
    close_db()
    logger.info("Shutdown completed")

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)
app.include_router(health.router, prefix=settings.API_V1_PREFIX)
app.include_router(tasks.router,  prefix=settings.API_V1_PREFIX)

@app.middleware("http")
async def request_logging(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or new_request_id()
    token = set_request_id(request_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        response.headers["X-Request-ID"] = request_id
        return response
    finally:
        reset_request_id(token)

@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    body = {"detail": "Internal server error"}
    if settings.is_development:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)

@app.get("/")
def root():
    prefix = settings.API_V1_PREFIX
    return {
        "message": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "endpoints": {
            "health": f"{prefix}/health",
            "tasks": f"{prefix}/tasks",
            "stats": f"{prefix}/tasks/stats",
        },
    }

def main() -> None:
    import uvicorn

    uvicorn.run("task_api.main:app", host=settings.HOST, port=settings.PORT)

if __name__ == "__main__":
    main()
