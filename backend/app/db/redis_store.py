# backend/app/db/redis_store.py

"""
Fachada sobre Redis para el almacenamiento de carritos.

Este módulo expone las operaciones de lista que necesita el servicio de
carrito (append, lectura completa, borrado de clave) y una reescritura
atómica protegida con WATCH/MULTI/EXEC. También mantiene la instancia
compartida de la aplicación:
- init_store(): crea la conexión y la verifica con un ping acotado
- get_store(): devuelve la instancia registrada
- close_store(): libera el pool de conexiones

El cliente redis.asyncio mantiene su propio pool de conexiones, por lo que
una única instancia se comparte entre todas las peticiones concurrentes sin
bloqueos en el código de la aplicación.
"""

import asyncio
import logging
from typing import Callable, List, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError, WatchError

from app.core.config import Settings
from app.core.exceptions import (
    RecordDecodeError,
    StartupConnectError,
    StoreConflict,
    StoreUnavailable,
)

logger = logging.getLogger(__name__)


class RedisStore:
    """
    Operaciones de lista sobre Redis direccionadas por una clave de texto.
    Toda excepción de conectividad se traduce a StoreUnavailable y un blob
    que no es UTF-8 válido, a RecordDecodeError.
    """

    def __init__(self, client: Redis, connect_timeout: float = 5.0):
        self._redis = client
        self.connect_timeout = connect_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisStore":
        """Construye el cliente a partir de REDIS_ADDRESS, REDIS_PASSWORD y REDIS_DB."""
        host, port = settings.redis_host_port
        client = Redis(
            host=host,
            port=port,
            password=settings.REDIS_PASSWORD,
            db=settings.REDIS_DB,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
            socket_connect_timeout=settings.REDIS_CONNECT_TIMEOUT,
            decode_responses=True,
        )
        return cls(client, connect_timeout=settings.REDIS_CONNECT_TIMEOUT)

    async def connect(self) -> None:
        """Verifica la conexión con un ping de timeout acotado."""
        try:
            await asyncio.wait_for(self._redis.ping(), timeout=self.connect_timeout)
        except (RedisError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Error conectando a Redis: {e}")
            raise StartupConnectError(f"Error connecting to Redis: {e}") from e
        logger.info("Conectado a Redis exitosamente.")

    async def close(self) -> None:
        await self._redis.aclose()

    async def append(self, key: str, payload: str) -> None:
        """Añade un blob al final de la lista en `key`, creándola si no existe."""
        try:
            await self._redis.rpush(key, payload)
        except RedisError as e:
            raise StoreUnavailable(f"Error appending to '{key}': {e}") from e

    async def read_all(self, key: str) -> List[str]:
        """Devuelve todos los blobs de la lista en orden. Lista vacía si la clave no existe."""
        try:
            return await self._redis.lrange(key, 0, -1)
        except UnicodeDecodeError as e:
            raise RecordDecodeError(f"Stored cart '{key}' is not valid UTF-8: {e}") from e
        except RedisError as e:
            raise StoreUnavailable(f"Error reading '{key}': {e}") from e

    async def delete_key(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except RedisError as e:
            raise StoreUnavailable(f"Error deleting '{key}': {e}") from e

    async def rewrite(self, key: str, build: Callable[[List[str]], str]) -> None:
        """
        Sustituye el contenido de la lista en `key` por un único blob.

        Lee la lista bajo WATCH, calcula el nuevo blob con `build(blobs)` y
        aplica DEL + RPUSH dentro de MULTI/EXEC. Si otra escritura toca la
        clave entre el WATCH y el EXEC se lanza StoreConflict y no se escribe
        nada. Las excepciones de `build` se propagan sin tocar el store.
        """
        try:
            async with self._redis.pipeline(transaction=True) as pipe:
                await pipe.watch(key)
                blobs = await pipe.lrange(key, 0, -1)
                payload = build(blobs)
                pipe.multi()
                pipe.delete(key)
                pipe.rpush(key, payload)
                await pipe.execute()
        except WatchError as e:
            raise StoreConflict(f"Key '{key}' changed during rewrite") from e
        except UnicodeDecodeError as e:
            raise RecordDecodeError(f"Stored cart '{key}' is not valid UTF-8: {e}") from e
        except RedisError as e:
            raise StoreUnavailable(f"Error rewriting '{key}': {e}") from e


# ========================================
# INSTANCIA COMPARTIDA
# ========================================

_store: Optional[RedisStore] = None


async def init_store(settings: Settings) -> RedisStore:
    """
    Crea la instancia compartida y verifica la conexión.
    Un fallo aquí lanza StartupConnectError y debe abortar el arranque.
    """
    global _store
    store = RedisStore.from_settings(settings)
    await store.connect()
    _store = store
    return _store


def get_store() -> RedisStore:
    """Devuelve la instancia registrada en el arranque."""
    if _store is None:
        raise StoreUnavailable("Redis store has not been initialized")
    return _store


async def close_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None
