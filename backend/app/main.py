# backend/app/main.py
"""
Punto de entrada principal de la aplicación FastAPI.

Este módulo configura y inicializa la aplicación FastAPI completa,
incluyendo la configuración de rutas, manejadores de errores y el ciclo
de vida de la aplicación.

Características principales:
- Configuración centralizada de la aplicación
- Conexión a Redis verificada en el arranque (un fallo aborta el proceso)
- Errores de dominio traducidos a respuestas JSON estructuradas
- Registro de routers de la API
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import settings  # Configuración centralizada de la aplicación
from app.core.exceptions import CartError, RequestDecodeError
from app.core.logging_config import setup_logging
from app.db.redis_store import close_store, init_store
from app.api.v1.api_router import api_router_v1  # Router principal de la API v1
from app.schemas.cart_schema import ErrorResponse

logger = logging.getLogger(__name__)

# ========================================
# CICLO DE VIDA DE LA APLICACIÓN
# ========================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Arranque: configura el logging y conecta con Redis. StartupConnectError
    no se captura, de modo que el servidor no llega a aceptar peticiones.
    Cierre: libera el pool de conexiones.
    """
    setup_logging(settings)
    await init_store(settings)
    logger.info(f"{settings.PROJECT_NAME} v{settings.PROJECT_VERSION} iniciado")
    yield
    await close_store()
    logger.info("Conexión con Redis cerrada")

# ========================================
# CONFIGURACIÓN DE LA APLICACIÓN FASTAPI
# ========================================

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    version=settings.PROJECT_VERSION,
    description="API de carrito de compras sobre Redis",
    lifespan=lifespan,
)

app.include_router(api_router_v1)

# ========================================
# MANEJADORES DE ERRORES
# ========================================

def _error_response(error: CartError) -> JSONResponse:
    body = ErrorResponse(error=error.code, detail=error.detail)
    return JSONResponse(status_code=error.status_code, content=body.model_dump())

@app.exception_handler(CartError)
async def cart_error_handler(request: Request, exc: CartError) -> JSONResponse:
    """Traduce los errores de dominio a su código HTTP con cuerpo estructurado."""
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path}: {exc.detail}", exc_info=exc)
    else:
        logger.warning(f"⚠️ {request.method} {request.url.path}: {exc.detail}")
    return _error_response(exc)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Un cuerpo que no se puede decodificar como Item es un 400, no un 422."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"⚠️ {request.method} {request.url.path}: cuerpo inválido ({problems})")
    return _error_response(RequestDecodeError(f"Error decoding request body: {problems}"))

# ========================================
# ENDPOINT RAÍZ
# ========================================

@app.get("/", tags=["Root"])
async def read_root():
    """
    Endpoint raíz para verificación básica del estado de la API.

    Returns:
        dict: Mensaje de bienvenida con nombre y versión del proyecto
    """
    return {"message": f"Bienvenido a {settings.PROJECT_NAME}", "version": settings.PROJECT_VERSION}


def run() -> None:
    """Arranca el servidor con uvicorn usando HOST y PORT de la configuración."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
