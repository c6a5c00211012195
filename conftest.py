"""Configuración de pytest y fixtures compartidas."""
import asyncio
from typing import Callable, Dict, List

import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.config import Settings
from app.core.exceptions import StoreConflict, StoreUnavailable
from app.main import app
from app.services.cart_service import CartService


class InMemoryStore:
    """
    Doble de RedisStore en memoria.

    Cada clave lleva un número de versión que se incrementa en cada escritura;
    `rewrite` cede el control al bucle de eventos entre la lectura y la
    escritura y falla con StoreConflict si la versión cambió, igual que un
    WATCH de Redis.
    """

    def __init__(self):
        self.data: Dict[str, List[str]] = {}
        self.versions: Dict[str, int] = {}
        self.available = True
        self.forced_conflicts = 0
        self.writes = 0

    def _check(self):
        if not self.available:
            raise StoreUnavailable("Connection refused")

    def _bump(self, key: str):
        self.versions[key] = self.versions.get(key, 0) + 1
        self.writes += 1

    async def append(self, key: str, payload: str) -> None:
        self._check()
        self.data.setdefault(key, []).append(payload)
        self._bump(key)

    async def read_all(self, key: str) -> List[str]:
        self._check()
        return list(self.data.get(key, []))

    async def delete_key(self, key: str) -> None:
        self._check()
        self.data.pop(key, None)
        self._bump(key)

    async def rewrite(self, key: str, build: Callable[[List[str]], str]) -> None:
        self._check()
        version = self.versions.get(key, 0)
        payload = build(list(self.data.get(key, [])))
        await asyncio.sleep(0)
        if self.forced_conflicts:
            self.forced_conflicts -= 1
            raise StoreConflict(f"Key '{key}' changed during rewrite")
        if self.versions.get(key, 0) != version:
            raise StoreConflict(f"Key '{key}' changed during rewrite")
        self.data[key] = [payload]
        self._bump(key)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def test_settings():
    return Settings(CART_MAX_RETRIES=2)


@pytest.fixture
def cart_service(store, test_settings):
    return CartService(store, test_settings)


@pytest.fixture
def client(store, test_settings):
    """TestClient con el store sustituido. No ejecuta el lifespan, así que no conecta a Redis."""
    app.dependency_overrides[deps.get_store] = lambda: store
    app.dependency_overrides[deps.get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_item():
    return {"id": "prod-123", "name": "Martillo", "price": 19.99}
