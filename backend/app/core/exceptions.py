# backend/app/core/exceptions.py
"""
Excepciones de dominio del servicio de carrito.

Cada excepción lleva el código HTTP y el identificador de error que el
manejador registrado en main.py usa para construir la respuesta
estructurada `{"error": ..., "detail": ...}`.
"""


class CartError(Exception):
    """Base de todos los errores que se traducen a una respuesta HTTP."""
    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class RequestDecodeError(CartError):
    """El cuerpo de la petición no se puede decodificar como un Item."""
    status_code = 400
    code = "request_decode_error"


class RecordDecodeError(CartError):
    """Un blob almacenado en Redis no tiene la forma esperada."""
    status_code = 500
    code = "record_decode_error"


class StoreUnavailable(CartError):
    """Fallo de conectividad o timeout contra Redis."""
    status_code = 500
    code = "store_unavailable"


class CartConflictError(CartError):
    """Se agotaron los reintentos de escritura optimista sobre un carrito."""
    status_code = 409
    code = "cart_conflict"


class StoreConflict(Exception):
    """La clave vigilada cambió entre WATCH y EXEC. Se reintenta en el servicio."""


class StartupConnectError(RuntimeError):
    """No se pudo establecer la conexión inicial con Redis. Es fatal."""
