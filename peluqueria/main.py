# peluqueria/main.py

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .cors import add_cors_policy
from .db import display_url, init_db
from .routers import (
    auth_routes,
    citas_routes,
    facturas_routes,
    reportes_routes,
    servicios_routes,
    usuarios_routes,
)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting API Peluquería")
    logger.info("Database URL: %s", display_url(settings.database_url))
    init_db()
    yield
    logger.info("API Peluquería stopped")


app = FastAPI(title="API Peluquería", version="1.0.0", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not loc:
        message = "Los datos de la solicitud no pueden ser nulos"
    else:
        message = f"{'.'.join(loc)}: {first.get('msg', 'valor inválido')}"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


@app.middleware("http")
async def unexpected_errors(request: Request, call_next):
    # registered before the CORS policy, which therefore wraps these 500s too
    try:
        return await call_next(request)
    except Exception as exc:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"message": "Error inesperado en el servidor", "error": str(exc)},
        )


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(usuarios_routes.router)
app.include_router(servicios_routes.router)
app.include_router(citas_routes.router)
app.include_router(facturas_routes.router)
app.include_router(reportes_routes.router)
app.include_router(auth_routes.router)

add_cors_policy(app, settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("peluqueria.main:app", host=settings.app_host, port=settings.app_port)
