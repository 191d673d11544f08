from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model

from orbis.models import Address, Category, PriceList, Product, ProductVariant, Profile, VariantPrice


APPLICATION = {
    "company_name": "Ege Solar Ltd.",
    "contact_name": "Mehmet Demir",
    "phone": "02321234567",
    "email": "info@egesolar.example",
    "address": "Atatürk Cad. No: 10 Konak / İzmir",
    "activity_field": "Güneş enerjisi kurulumu",
    "tax_office": "Konak",
    "tax_number": "1234567890",
}


class CatalogFixturesMixin:
    """Small builders shared by the Orbis test cases."""

    def make_user(self, username: str = "shopper", *, role: str | None = None, **kwargs):
        User = get_user_model()
        user = User.objects.create_user(username, password="testpass", **kwargs)
        if role is not None:
            Profile.objects.create(user=user, role=role)
        return user

    def make_product(self, name: str = "Güneş Paneli", *, is_active: bool = True, category: Category | None = None) -> Product:
        slug = name.lower().replace(" ", "-").replace("ü", "u").replace("ş", "s")
        return Product.objects.create(name=name, slug=slug, category=category, is_active=is_active)

    def make_variant(
        self,
        sku: str,
        base_price: str | Decimal = "100.00",
        *,
        stock: int = 10,
        is_active: bool = True,
        product: Product | None = None,
        name: str | None = None,
    ) -> ProductVariant:
        if product is None:
            product = self.make_product(f"Ürün {sku}")
        return ProductVariant.objects.create(
            product=product,
            name=name or f"Varyant {sku}",
            sku=sku,
            base_price=Decimal(str(base_price)),
            stock=stock,
            is_active=is_active,
        )

    def make_price_list(self, slug: str = "bayi", *, role: str = "b2b", is_active: bool = True) -> PriceList:
        return PriceList.objects.create(name=slug.title(), slug=slug, role=role, is_active=is_active)

    def set_list_price(self, price_list: PriceList, variant: ProductVariant, price: str, *, is_active: bool = True) -> VariantPrice:
        return VariantPrice.objects.create(
            price_list=price_list,
            variant=variant,
            price=Decimal(price),
            is_active=is_active,
        )

    def make_address(self, user, **overrides) -> Address:
        data = {
            "full_name": "Ayşe Yılmaz",
            "phone": "05551234567",
            "city": "İzmir",
            "district": "Bornova",
            "address_line": "Kazımdirik Mah. 372. Sok. No: 5",
            "postal_code": "35100",
        }
        data.update(overrides)
        return Address.objects.create(user=user, **data)
