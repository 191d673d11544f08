from __future__ import annotations

import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _id():
    return models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=120, verbose_name="ad")),
                ("slug", models.SlugField(max_length=140, unique=True, verbose_name="slug")),
                ("display_order", models.IntegerField(default=0, verbose_name="sıra")),
            ],
            options={
                "verbose_name": "kategori",
                "verbose_name_plural": "kategoriler",
                "ordering": ("display_order", "name"),
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=200, verbose_name="ad")),
                ("slug", models.SlugField(max_length=220, unique=True, verbose_name="slug")),
                ("description", models.TextField(blank=True, default="", verbose_name="açıklama")),
                ("image_url", models.URLField(blank=True, default="", max_length=500, verbose_name="görsel")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="aktif")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="orbis.category",
                        verbose_name="kategori",
                    ),
                ),
            ],
            options={
                "verbose_name": "ürün",
                "verbose_name_plural": "ürünler",
                "ordering": ("-created_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="ProductVariant",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=200, verbose_name="ad")),
                ("sku", models.CharField(max_length=64, unique=True, verbose_name="SKU")),
                ("base_price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="taban fiyat")),
                ("stock", models.PositiveIntegerField(default=0, verbose_name="stok")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="aktif")),
                ("attributes", models.JSONField(blank=True, default=dict, verbose_name="özellikler")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="variants",
                        to="orbis.product",
                        verbose_name="ürün",
                    ),
                ),
            ],
            options={
                "verbose_name": "varyant",
                "verbose_name_plural": "varyantlar",
                "ordering": ("product_id", "name"),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("base_price__gte", 0)),
                        name="variant_base_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PriceList",
            fields=[
                ("id", _id()),
                ("name", models.CharField(max_length=120, verbose_name="ad")),
                ("slug", models.SlugField(max_length=140, unique=True, verbose_name="slug")),
                ("currency", models.CharField(default="TRY", max_length=3, verbose_name="para birimi")),
                ("role", models.CharField(db_index=True, default="b2b", max_length=16, verbose_name="rol")),
                ("is_active", models.BooleanField(default=True, verbose_name="aktif")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
            ],
            options={
                "verbose_name": "fiyat listesi",
                "verbose_name_plural": "fiyat listeleri",
                "ordering": ("name",),
            },
        ),
        migrations.CreateModel(
            name="VariantPrice",
            fields=[
                ("id", _id()),
                ("price", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="fiyat")),
                ("is_active", models.BooleanField(db_index=True, default=True, verbose_name="aktif")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "price_list",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="entries",
                        to="orbis.pricelist",
                        verbose_name="fiyat listesi",
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="prices",
                        to="orbis.productvariant",
                        verbose_name="varyant",
                    ),
                ),
            ],
            options={
                "verbose_name": "liste fiyatı",
                "verbose_name_plural": "liste fiyatları",
                "constraints": [
                    models.UniqueConstraint(fields=("variant", "price_list"), name="uniq_variant_price_list"),
                    models.CheckConstraint(
                        condition=models.Q(("price__gte", 0)),
                        name="variant_price_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", _id()),
                (
                    "role",
                    models.CharField(
                        blank=True,
                        choices=[("b2c", "bireysel"), ("b2b", "bayi")],
                        default="b2c",
                        max_length=16,
                        null=True,
                        verbose_name="rol",
                    ),
                ),
                ("full_name", models.CharField(blank=True, default="", max_length=200, verbose_name="ad soyad")),
                ("phone", models.CharField(blank=True, default="", max_length=32, verbose_name="telefon")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="kullanıcı",
                    ),
                ),
            ],
            options={
                "verbose_name": "profil",
                "verbose_name_plural": "profiller",
            },
        ),
        migrations.CreateModel(
            name="Address",
            fields=[
                ("id", _id()),
                (
                    "type",
                    models.CharField(
                        choices=[("shipping", "teslimat"), ("billing", "fatura")],
                        default="shipping",
                        max_length=16,
                        verbose_name="tip",
                    ),
                ),
                ("full_name", models.CharField(max_length=200, verbose_name="ad soyad")),
                ("phone", models.CharField(max_length=32, verbose_name="telefon")),
                ("country", models.CharField(default="Türkiye", max_length=64, verbose_name="ülke")),
                ("city", models.CharField(max_length=64, verbose_name="il")),
                ("district", models.CharField(max_length=64, verbose_name="ilçe")),
                ("address_line", models.CharField(max_length=500, verbose_name="adres")),
                ("postal_code", models.CharField(blank=True, default="", max_length=16, verbose_name="posta kodu")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="addresses",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="kullanıcı",
                    ),
                ),
            ],
            options={
                "verbose_name": "adres",
                "verbose_name_plural": "adresler",
                "ordering": ("id",),
            },
        ),
        migrations.CreateModel(
            name="Cart",
            fields=[
                ("id", _id()),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "aktif"), ("converted", "siparişe dönüştü")],
                        db_index=True,
                        default="active",
                        max_length=16,
                        verbose_name="durum",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                ("converted_at", models.DateTimeField(blank=True, null=True, verbose_name="dönüşme")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="carts",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="kullanıcı",
                    ),
                ),
            ],
            options={
                "verbose_name": "sepet",
                "verbose_name_plural": "sepetler",
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status", "active")),
                        fields=("user",),
                        name="uniq_active_cart_per_user",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CartItem",
            fields=[
                ("id", _id()),
                ("quantity", models.PositiveIntegerField(default=1, verbose_name="adet")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "cart",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orbis.cart",
                        verbose_name="sepet",
                    ),
                ),
                (
                    "variant",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cart_items",
                        to="orbis.productvariant",
                        verbose_name="varyant",
                    ),
                ),
            ],
            options={
                "verbose_name": "sepet kalemi",
                "verbose_name_plural": "sepet kalemleri",
                "ordering": ("id",),
                "constraints": [
                    models.UniqueConstraint(fields=("cart", "variant"), name="uniq_cart_item_variant"),
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="cart_item_qty_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DealerApplication",
            fields=[
                ("id", _id()),
                ("company_name", models.CharField(max_length=200, verbose_name="firma adı")),
                ("contact_name", models.CharField(max_length=200, verbose_name="yetkili adı")),
                ("phone", models.CharField(max_length=32, verbose_name="telefon")),
                ("email", models.EmailField(max_length=254, verbose_name="e-posta")),
                ("address", models.TextField(verbose_name="adres")),
                ("activity_field", models.CharField(max_length=200, verbose_name="faaliyet alanı")),
                ("tax_office", models.CharField(max_length=120, verbose_name="vergi dairesi")),
                ("tax_number", models.CharField(max_length=32, verbose_name="vergi no / TCKN")),
                (
                    "status",
                    models.CharField(
                        choices=[("pending", "beklemede"), ("approved", "onaylandı"), ("rejected", "reddedildi")],
                        db_index=True,
                        default="pending",
                        max_length=16,
                        verbose_name="durum",
                    ),
                ),
                ("processed_by", models.CharField(blank=True, default="", max_length=150, verbose_name="işleyen")),
                ("processed_at", models.DateTimeField(blank=True, null=True, verbose_name="işlenme")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="dealer_applications",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="kullanıcı",
                    ),
                ),
            ],
            options={
                "verbose_name": "bayilik başvurusu",
                "verbose_name_plural": "bayilik başvuruları",
                "ordering": ("-created_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="IdempotencyKey",
            fields=[
                ("id", _id()),
                ("scope", models.CharField(max_length=64, verbose_name="kapsam")),
                ("key", models.CharField(max_length=128, verbose_name="anahtar")),
                (
                    "status",
                    models.CharField(
                        choices=[("in_progress", "devam ediyor"), ("done", "tamamlandı"), ("failed", "başarısız")],
                        default="in_progress",
                        max_length=16,
                        verbose_name="durum",
                    ),
                ),
                ("response_code", models.IntegerField(blank=True, null=True, verbose_name="yanıt kodu")),
                ("response_body", models.JSONField(blank=True, null=True, verbose_name="yanıt gövdesi")),
                ("expires_at", models.DateTimeField(blank=True, db_index=True, null=True, verbose_name="son geçerlilik")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
            ],
            options={
                "verbose_name": "tekrar koruma anahtarı",
                "verbose_name_plural": "tekrar koruma anahtarları",
                "constraints": [
                    models.UniqueConstraint(fields=("scope", "key"), name="uniq_idempotency_scope_key"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", _id()),
                ("order_no", models.CharField(max_length=32, unique=True, verbose_name="sipariş no")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_payment", "ödeme bekleniyor"),
                            ("pending", "sipariş alındı"),
                            ("processing", "hazırlanıyor"),
                            ("shipped", "kargolandı"),
                            ("delivered", "teslim edildi"),
                            ("cancelled", "iptal edildi"),
                            ("refunded", "iade edildi"),
                        ],
                        db_index=True,
                        default="pending_payment",
                        max_length=32,
                        verbose_name="durum",
                    ),
                ),
                ("role", models.CharField(default="b2c", max_length=16, verbose_name="fiyat rolü")),
                ("currency", models.CharField(default="TRY", max_length=3, verbose_name="para birimi")),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="ara toplam")),
                ("discount_total", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="indirim")),
                ("shipping_total", models.DecimalField(decimal_places=2, default=0, max_digits=12, verbose_name="kargo")),
                ("grand_total", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="genel toplam")),
                (
                    "shipping_address",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        verbose_name="teslimat adresi",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="güncellenme")),
                (
                    "cart",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="orders",
                        to="orbis.cart",
                        verbose_name="sepet",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="orders",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="kullanıcı",
                    ),
                ),
            ],
            options={
                "verbose_name": "sipariş",
                "verbose_name_plural": "siparişler",
                "ordering": ("-created_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", _id()),
                ("variant_id", models.BigIntegerField(blank=True, db_index=True, null=True, verbose_name="varyant id")),
                ("product_id", models.BigIntegerField(blank=True, null=True, verbose_name="ürün id")),
                ("quantity", models.PositiveIntegerField(verbose_name="adet")),
                ("unit_price_snapshot", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="birim fiyat")),
                ("line_total", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="satır toplamı")),
                ("product_name_snapshot", models.CharField(blank=True, default="", max_length=200, verbose_name="ürün adı")),
                ("sku_snapshot", models.CharField(blank=True, default="", max_length=64, verbose_name="SKU")),
                ("attributes_snapshot", models.JSONField(blank=True, default=dict, verbose_name="özellikler")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="orbis.order",
                        verbose_name="sipariş",
                    ),
                ),
            ],
            options={
                "verbose_name": "sipariş kalemi",
                "verbose_name_plural": "sipariş kalemleri",
                "ordering": ("id",),
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity__gt", 0)),
                        name="order_item_qty_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderEvent",
            fields=[
                ("id", _id()),
                ("type", models.CharField(db_index=True, max_length=64, verbose_name="tip")),
                ("actor", models.CharField(max_length=150, verbose_name="aktör")),
                (
                    "payload",
                    models.JSONField(
                        default=dict,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        verbose_name="içerik",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="oluşturulma")),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="events",
                        to="orbis.order",
                        verbose_name="sipariş",
                    ),
                ),
            ],
            options={
                "verbose_name": "sipariş olayı",
                "verbose_name_plural": "sipariş olayları",
                "ordering": ("created_at", "id"),
            },
        ),
    ]
