"""
Django Orbis: Role-aware pricing, cart and checkout core for a solar-products storefront.

Basic usage:
    from orbis.models import ProductVariant, PriceList, Cart, Order
    from orbis.services import PricingService, CartService, CheckoutService

Flow:
    RoleService -> PricingService -> CartService -> CheckoutService
"""

__title__ = "Django Orbis"
__version__ = "0.1.0"
__author__ = "Orbis Enerji"
