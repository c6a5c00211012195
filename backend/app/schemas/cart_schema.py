# backend/app/schemas/cart_schema.py
"""
Esquemas Pydantic para la gestión del carrito de la compra.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Item(BaseModel):
    """Producto añadido a un carrito. Inmutable una vez creado."""
    id: str
    name: str
    price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> float:
        # En JSON el precio viaja como número, no como cadena
        return float(price)


class ShoppingCart(BaseModel):
    """Esquema que representa el estado completo del carrito de un usuario."""
    user_id: str
    products: List[Item] = []


class ErrorResponse(BaseModel):
    """Cuerpo de error estructurado devuelto por los manejadores de excepciones."""
    error: str
    detail: str
