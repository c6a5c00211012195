# backend/app/core/config.py
"""
Este archivo contiene la configuración de la aplicación.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Tuple
from pathlib import Path

# Apunta al directorio 'backend/'
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic BaseSettings.
    Variables sensibles desde .env, defaults seguros para el resto.
    """
    # Configuración general del proyecto
    BASE_DIR: Path = BASE_DIR
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Cart API"
    PROJECT_VERSION: str = "0.1.0"

    # Configuración de Redis (dirección host:puerto, credencial e índice de BD)
    REDIS_ADDRESS: str = "localhost:6379"
    REDIS_PASSWORD: Optional[str] = None
    REDIS_DB: int = 0
    REDIS_CONNECT_TIMEOUT: float = 5.0
    REDIS_SOCKET_TIMEOUT: float = 5.0

    # Carrito
    CART_KEY_PREFIX: str = "cart:"
    CART_MAX_RETRIES: int = 5

    # Logging - Defaults seguros
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Server - Del .env con defaults
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    @field_validator("REDIS_ADDRESS")
    @classmethod
    def validate_redis_address(cls, value: str) -> str:
        """Rechaza direcciones mal formadas al cargar la configuración."""
        split_address(value)
        return value

    @property
    def redis_host_port(self) -> Tuple[str, int]:
        """Separa REDIS_ADDRESS en (host, puerto). Sin puerto explícito se usa 6379."""
        return split_address(self.REDIS_ADDRESS)


def split_address(address: str, default_port: int = 6379) -> Tuple[str, int]:
    """
    Separa una dirección `host:puerto` en sus partes.
    Las direcciones IPv6 van entre corchetes: `[::1]:6379` o `[::1]`.
    """
    if address.startswith("["):
        end = address.find("]")
        if end == -1:
            raise ValueError(f"Unclosed IPv6 bracket in address '{address}'")
        host, rest = address[1:end], address[end + 1:]
        if not rest:
            port = str(default_port)
        elif rest.startswith(":"):
            port = rest[1:]
        else:
            raise ValueError(f"Unexpected text after IPv6 host in address '{address}'")
    elif address.count(":") > 1:
        raise ValueError(f"IPv6 address '{address}' must be written as [host]:port")
    else:
        host, sep, port = address.partition(":")
        if not sep:
            port = str(default_port)

    if not host:
        raise ValueError(f"Missing host in address '{address}'")
    if not port.isdigit() or not 0 < int(port) < 65536:
        raise ValueError(f"Invalid port '{port}' in address '{address}'")
    return host, int(port)

# Instancia global de la configuración
settings = Settings()
