"""
Orbis Services.

Re-exports every service:
    from orbis.services import PricingService, CartService, CheckoutService, ...
"""

from .cart import CartService, CartSummary, PricedLine  # noqa: F401
from .catalog import CatalogService  # noqa: F401
from .checkout import CheckoutService  # noqa: F401
from .dealers import DealerService  # noqa: F401
from .orders import OrderService  # noqa: F401
from .pricing import PriceListService, PricingService  # noqa: F401
from .roles import RoleService  # noqa: F401
