# backend/app/api/deps.py
"""
Módulo de dependencias para FastAPI.

Este archivo centraliza todas las dependencias que pueden ser inyectadas
en los endpoints de la API. Sigue el patrón de Dependency Injection de FastAPI
para que los tests puedan sustituir el store de Redis con
`app.dependency_overrides`.
"""

from app.core.config import Settings, settings
from app.db import redis_store
from app.db.redis_store import RedisStore

def get_settings() -> Settings:
    """
    Dependencia de FastAPI para obtener el objeto de configuración.
    """
    return settings

def get_store() -> RedisStore:
    """
    Dependencia de FastAPI para obtener el store de Redis compartido,
    inicializado durante el arranque de la aplicación.
    """
    return redis_store.get_store()
