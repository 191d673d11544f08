from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from orbis.models import (
    Address,
    DealerApplication,
    Order,
    OrderItem,
    PriceList,
    Product,
    ProductVariant,
)


class VariantSerializer(serializers.ModelSerializer):
    # Effective price attached by PricingService.price_products
    price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = ProductVariant
        fields = ("id", "name", "sku", "base_price", "price", "stock", "attributes")


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.SlugRelatedField(slug_field="slug", read_only=True)
    variants = VariantSerializer(source="active_variants", many=True, read_only=True)

    class Meta:
        model = Product
        fields = ("id", "name", "slug", "description", "category", "image_url", "variants")


class PricedLineSerializer(serializers.Serializer):
    item_id = serializers.IntegerField()
    variant_id = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField()
    name = serializers.CharField()
    sku = serializers.CharField()
    quantity = serializers.IntegerField()
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2)
    missing = serializers.BooleanField()


class CartSummarySerializer(serializers.Serializer):
    cart_id = serializers.IntegerField(allow_null=True)
    role = serializers.CharField()
    lines = PricedLineSerializer(many=True)
    items_count = serializers.IntegerField()
    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2)


class CartAddSerializer(serializers.Serializer):
    variant_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, default=1)


class CartQuantitySerializer(serializers.Serializer):
    """
    POST /api/cart/items/{id}/quantity

    Exactly one of:
    - quantity: absolute value (< 1 removes the line)
    - change: +1 or -1
    """

    quantity = serializers.IntegerField(required=False)
    change = serializers.ChoiceField(choices=[1, -1], required=False)

    def validate(self, attrs):
        if ("quantity" in attrs) == ("change" in attrs):
            raise serializers.ValidationError("Send either 'quantity' or 'change'.")
        return attrs


class CheckoutSerializer(serializers.Serializer):
    address_id = serializers.IntegerField()
    idempotency_key = serializers.CharField(required=False, allow_blank=False, max_length=128)


class AddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = Address
        fields = (
            "id",
            "type",
            "full_name",
            "phone",
            "country",
            "city",
            "district",
            "address_line",
            "postal_code",
        )


class OrderItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = (
            "variant_id",
            "product_id",
            "quantity",
            "unit_price_snapshot",
            "line_total",
            "product_name_snapshot",
            "sku_snapshot",
            "attributes_snapshot",
        )


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id",
            "order_no",
            "status",
            "currency",
            "subtotal",
            "discount_total",
            "shipping_total",
            "grand_total",
            "shipping_address",
            "items",
            "created_at",
        )


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


class DealerApplicationSerializer(serializers.ModelSerializer):
    """
    Dealer application form.

    Minimum lengths follow the storefront form.
    """

    company_name = serializers.CharField(min_length=2, max_length=200)
    contact_name = serializers.CharField(min_length=2, max_length=200)
    phone = serializers.CharField(min_length=10, max_length=32)
    email = serializers.EmailField()
    address = serializers.CharField(min_length=10)
    activity_field = serializers.CharField(min_length=2, max_length=200)
    tax_office = serializers.CharField(min_length=2, max_length=120)
    tax_number = serializers.CharField(min_length=10, max_length=32)

    class Meta:
        model = DealerApplication
        fields = (
            "id",
            "company_name",
            "contact_name",
            "phone",
            "email",
            "address",
            "activity_field",
            "tax_office",
            "tax_number",
            "status",
            "created_at",
        )
        read_only_fields = ("status", "created_at")


class PriceListSerializer(serializers.ModelSerializer):
    class Meta:
        model = PriceList
        fields = ("id", "name", "slug", "currency", "role", "is_active")


class PriceGridRowSerializer(serializers.Serializer):
    variant_id = serializers.IntegerField()
    product_name = serializers.CharField()
    name = serializers.CharField()
    sku = serializers.CharField()
    base_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    list_price = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)


class SetPriceSerializer(serializers.Serializer):
    variant_id = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
