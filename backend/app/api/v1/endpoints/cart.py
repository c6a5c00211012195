# backend/app/api/v1/endpoints/cart.py
"""
Este archivo contiene los endpoints para el carrito de compras.

Se encarga de las operaciones de agregar productos y obtener el contenido
del carrito. El usuario se identifica con la cabecera `X-User-Id`; si no se
envía, se crea un carrito nuevo y su id se devuelve en la respuesta.
"""

from fastapi import APIRouter, Depends, Header, Response, status
from fastapi.responses import PlainTextResponse
from typing import List, Optional
import logging

from app.api import deps
from app.core.config import Settings
from app.db.redis_store import RedisStore
from app.schemas.cart_schema import ErrorResponse, Item
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)

# Router para el carrito de compras
router = APIRouter()

USER_ID_HEADER = "X-User-Id"

def get_cart_service(
    store: RedisStore = Depends(deps.get_store),
    settings: Settings = Depends(deps.get_settings),
) -> CartService:
    """
    Dependencia para obtener el servicio de carrito.
    """
    return CartService(store, settings)

@router.post(
    "/add-to-cart",
    status_code=status.HTTP_201_CREATED,
    response_class=PlainTextResponse,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def add_to_cart(
    item: Item,
    response: Response,
    x_user_id: Optional[str] = Header(default=None),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Añade un producto al carrito del usuario indicado en `X-User-Id`.
    """
    requested_id = (x_user_id or "").strip() or None
    user_id = await cart_service.add_item(item, requested_id)
    response.headers[USER_ID_HEADER] = user_id
    return f"Product added to cart: {user_id}"

@router.get(
    "/view-cart/{user_id}",
    response_model=List[Item],
    responses={500: {"model": ErrorResponse}},
)
async def view_cart(
    user_id: str,
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Obtiene el contenido del carrito de un usuario. Un usuario sin carrito
    devuelve un array vacío.
    """
    cart = await cart_service.view_cart(user_id)
    logger.debug(f"Carrito {user_id}: {len(cart.products)} productos")
    return cart.products
