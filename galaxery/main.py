from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from .api.api import api_router
from .core.errors import (
    ConflictFailure,
    NotFoundFailure,
    PersistenceFailure,
    ValidationFailure,
)
from .db.database import create_tables
import logging
import json
import traceback

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # make sure tables are created
    create_tables()
    yield

logger = logging.getLogger("fastapi")

app = FastAPI(title="Galaxery", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    body = await request.body()
    request_info = {
        "url": str(request.url),
        "method": request.method,
        "body": body.decode(errors="replace") if body else None,
        "query_params": dict(request.query_params)
    }

    try:
        response = await call_next(request)

        if response.status_code >= 400:
            response_body = b""
            async for chunk in response.body_iterator:
                response_body += chunk

            logger.error(
                f"Request failed with status {response.status_code}\n"
                f"Request: {json.dumps(request_info, indent=2)}\n"
                f"Response: {response_body.decode(errors='replace')}\n"
            )
            return Response(
                content=response_body,
                status_code=response.status_code,
                headers=dict(response.headers),
                media_type=response.media_type
            )

        return response

    except Exception as e:
        logger.error(
            f"Request failed with exception\n"
            f"Request: {json.dumps(request_info, indent=2)}\n"
            f"Error: {str(e)}\n"
            f"Traceback: {traceback.format_exc()}"
        )
        raise


def failure_handler(status_code: int):
    async def handler(request: Request, exc: Exception):
        log = logger.error if status_code >= 500 else logger.warning
        log(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})
    return handler

app.add_exception_handler(ValidationFailure, failure_handler(422))
app.add_exception_handler(NotFoundFailure, failure_handler(status.HTTP_404_NOT_FOUND))
app.add_exception_handler(ConflictFailure, failure_handler(status.HTTP_409_CONFLICT))
app.add_exception_handler(PersistenceFailure, failure_handler(status.HTTP_503_SERVICE_UNAVAILABLE))


@app.get("/ping", response_class=PlainTextResponse, include_in_schema=False)
def ping():
    return "ok"

# register the API router
app.include_router(api_router, prefix="/api")
