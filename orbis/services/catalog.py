"""
CatalogService: Storefront product queries (listing, category, search, detail).
"""

from __future__ import annotations

from django.db.models import Prefetch, Q, QuerySet

from orbis.models import Product, ProductVariant


class CatalogService:
    @staticmethod
    def products(query: str | None = None, category: str | None = None) -> QuerySet:
        """
        Active products with their active variants prefetched as `active_variants`.

        Args:
            query: free text matched against product name, description and variant SKU
            category: category slug
        """
        qs = Product.objects.filter(is_active=True).select_related("category")
        if category:
            qs = qs.filter(category__slug=category)
        if query:
            qs = qs.filter(
                Q(name__icontains=query)
                | Q(description__icontains=query)
                | Q(variants__sku__icontains=query)
            ).distinct()
        return qs.prefetch_related(
            Prefetch(
                "variants",
                queryset=ProductVariant.objects.filter(is_active=True).order_by("name", "id"),
                to_attr="active_variants",
            )
        )

    @staticmethod
    def product(slug: str) -> Product | None:
        return CatalogService.products().filter(slug=slug).first()
