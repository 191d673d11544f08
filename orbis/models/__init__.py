"""
Orbis Models.

Re-exports every model so callers can write:
    from orbis.models import ProductVariant, Cart, Order, ...
"""

from .address import Address  # noqa: F401
from .cart import Cart, CartItem  # noqa: F401
from .catalog import Category, Product, ProductVariant  # noqa: F401
from .dealer import DealerApplication  # noqa: F401
from .idempotency import IdempotencyKey  # noqa: F401
from .order import Order, OrderEvent, OrderItem  # noqa: F401
from .pricing import PriceList, VariantPrice  # noqa: F401
from .profile import Profile  # noqa: F401
