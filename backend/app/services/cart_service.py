# backend/app/services/cart_service.py
"""
Servicio de Carrito de Compras para la aplicación.

Este servicio gestiona el carrito de compras de un usuario en Redis.

Formato persistido:
- Una clave por usuario: `cart:<user_id>`
- La clave es una lista de Redis cuyo estado estable tiene un único elemento,
  un array JSON con todos los productos en orden de inserción.

La lectura concatena, en orden, los arrays de todos los elementos de la
lista, de modo que también acepta datos antiguos con varios elementos. Un
elemento que no sea un array de productos invalida la lectura completa.
"""
import json
import logging
import uuid
from decimal import Decimal
from typing import Iterable, List, Optional

from pydantic import ValidationError

from app.core.config import Settings
from app.core.exceptions import CartConflictError, RecordDecodeError, StoreConflict
from app.db.redis_store import RedisStore
from app.schemas.cart_schema import Item, ShoppingCart

logger = logging.getLogger(__name__)


def decode_items(blobs: Iterable[str]) -> List[Item]:
    """
    Decodifica los blobs de un carrito a una única lista de productos.
    Cualquier blob corrupto invalida la lectura completa.
    """
    items: List[Item] = []
    for blob in blobs:
        try:
            data = json.loads(blob, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise RecordDecodeError(f"Error decoding product array from JSON: {e}") from e

        if not isinstance(data, list):
            raise RecordDecodeError(f"Unexpected stored cart shape: {type(data).__name__}")

        try:
            items.extend(Item.model_validate(record) for record in data)
        except ValidationError as e:
            raise RecordDecodeError(f"Error decoding product from JSON: {e}") from e
    return items


def encode_items(items: Iterable[Item]) -> str:
    """Serializa la lista completa de productos como un único array JSON."""
    return json.dumps([item.model_dump(mode="json") for item in items])


class CartService:
    """
    Servicio para gestionar el carrito de compras de un usuario en Redis.
    """
    def __init__(self, store: RedisStore, settings: Settings):
        self.store = store
        self.key_prefix = settings.CART_KEY_PREFIX
        self.max_retries = settings.CART_MAX_RETRIES

    def _get_cart_key(self, user_id: str) -> str:
        """Genera la clave de Redis para el carrito de un usuario."""
        return f"{self.key_prefix}{user_id}"

    async def add_item(self, item: Item, user_id: Optional[str] = None) -> str:
        """
        Añade un producto al final del carrito y devuelve el id del usuario.

        Sin `user_id` se genera uno nuevo (UUID4), que el cliente debe
        reenviar en las siguientes llamadas para seguir usando el mismo
        carrito. La reescritura es optimista: si otro escritor modifica la
        clave entre la lectura y la escritura se vuelve a leer y aplicar,
        hasta CART_MAX_RETRIES reintentos.
        """
        if not user_id:
            user_id = str(uuid.uuid4())
        cart_key = self._get_cart_key(user_id)

        def build(blobs: List[str]) -> str:
            items = decode_items(blobs)
            items.append(item)
            return encode_items(items)

        for attempt in range(self.max_retries + 1):
            try:
                await self.store.rewrite(cart_key, build)
            except StoreConflict:
                logger.warning(
                    f"Conflicto de escritura en {cart_key} (intento {attempt + 1}/{self.max_retries + 1})"
                )
                continue
            logger.info(f"Producto '{item.id}' añadido al carrito {cart_key}")
            return user_id

        logger.error(f"Reintentos agotados al actualizar {cart_key}")
        raise CartConflictError(f"Cart '{user_id}' is being modified concurrently, try again")

    async def get_cart_contents(self, user_id: str) -> List[Item]:
        """
        Obtiene todos los productos del carrito de un usuario en orden de inserción.
        Un usuario sin carrito devuelve una lista vacía.
        """
        blobs = await self.store.read_all(self._get_cart_key(user_id))
        return decode_items(blobs)

    async def view_cart(self, user_id: str) -> ShoppingCart:
        """Devuelve el carrito completo de un usuario."""
        return ShoppingCart(user_id=user_id, products=await self.get_cart_contents(user_id))
