from __future__ import annotations

import logging

from django.contrib import admin
from django.http import HttpResponseRedirect
from django.urls import reverse
from django.utils.translation import gettext_lazy as _
from unfold.admin import ModelAdmin, TabularInline
from unfold.contrib.filters.admin.choice_filters import ChoicesRadioFilter
from unfold.decorators import action, display

from .exceptions import DealerError, InvalidTransition
from .models import (
    Address,
    Cart,
    CartItem,
    Category,
    DealerApplication,
    IdempotencyKey,
    Order,
    OrderEvent,
    OrderItem,
    PriceList,
    Product,
    ProductVariant,
    Profile,
    VariantPrice,
)
from .services import DealerService, OrderService


logger = logging.getLogger(__name__)


def history_action(modeladmin, request, object_id):
    """Redirect to the object's history page."""
    url = reverse(
        f"admin:{modeladmin.model._meta.app_label}_{modeladmin.model._meta.model_name}_history",
        args=[object_id],
    )
    return HttpResponseRedirect(url)


# =============================================================================
# CATALOG
# =============================================================================


@admin.register(Category)
class CategoryAdmin(ModelAdmin):
    list_display = ("name", "slug", "display_order")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("display_order", "name")


class ProductVariantInline(TabularInline):
    model = ProductVariant
    extra = 0
    fields = ("name", "sku", "base_price", "stock", "is_active", "attributes")
    show_change_link = True


@admin.register(Product)
class ProductAdmin(ModelAdmin):
    list_display = ("name", "slug", "category", "variants_count", "is_active", "created_at")
    list_filter = ("is_active", "category")
    search_fields = ("name", "slug", "variants__sku")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("-created_at", "id")
    list_filter_submit = True
    list_fullwidth = True
    compressed_fields = True
    warn_unsaved_form = True

    inlines = [ProductVariantInline]

    fieldsets = (
        (_("Ürün"), {"fields": ("name", "slug", "category", "description"), "classes": ("tab",)}),
        (_("Görsel"), {"fields": ("image_url",), "classes": ("tab",)}),
        (_("Durum"), {"fields": ("is_active", "created_at", "updated_at"), "classes": ("tab",)}),
    )
    readonly_fields = ("created_at", "updated_at")

    @display(description=_("varyant"))
    def variants_count(self, obj: Product) -> int:
        return obj.variants.count()


@admin.register(ProductVariant)
class ProductVariantAdmin(ModelAdmin):
    list_display = ("sku", "name", "product", "base_price", "stock", "is_active")
    list_filter = ("is_active",)
    search_fields = ("sku", "name", "product__name")
    autocomplete_fields = ("product",)
    ordering = ("product_id", "name")
    list_filter_submit = True


# =============================================================================
# PRICING
# =============================================================================


class VariantPriceInline(TabularInline):
    model = VariantPrice
    extra = 0
    fields = ("variant", "price", "is_active", "created_at")
    readonly_fields = ("created_at",)
    autocomplete_fields = ("variant",)


@admin.register(PriceList)
class PriceListAdmin(ModelAdmin):
    list_display = ("name", "slug", "role", "currency", "is_active", "created_at")
    list_filter = ("is_active", "role")
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    ordering = ("name",)

    inlines = [VariantPriceInline]


# =============================================================================
# CUSTOMERS
# =============================================================================


@admin.register(Profile)
class ProfileAdmin(ModelAdmin):
    list_display = ("user", "full_name", "phone", "role_badge", "created_at")
    list_filter = (("role", ChoicesRadioFilter),)
    search_fields = ("user__username", "user__email", "full_name", "phone")
    list_filter_submit = True

    @display(description=_("rol"), label={"bireysel": "info", "bayi": "success"})
    def role_badge(self, obj: Profile) -> str:
        return obj.get_role_display() or "-"


@admin.register(Address)
class AddressAdmin(ModelAdmin):
    list_display = ("full_name", "user", "type", "city", "district", "created_at")
    list_filter = ("type", "city")
    search_fields = ("full_name", "user__username", "phone", "city")


@admin.register(DealerApplication)
class DealerApplicationAdmin(ModelAdmin):
    list_display = ("company_name", "user", "contact_name", "tax_number", "status_badge", "created_at")
    list_filter = (("status", ChoicesRadioFilter),)
    search_fields = ("company_name", "contact_name", "tax_number", "user__username", "email")
    ordering = ("-created_at",)
    list_filter_submit = True
    list_fullwidth = True

    actions = ["approve_selected", "reject_selected"]

    fieldsets = (
        (
            _("Firma"),
            {
                "fields": ("company_name", "activity_field", "tax_office", "tax_number", "address"),
                "classes": ("tab",),
            },
        ),
        (_("İletişim"), {"fields": ("user", "contact_name", "phone", "email"), "classes": ("tab",)}),
        (_("Durum"), {"fields": ("status", "processed_by", "processed_at", "created_at"), "classes": ("tab",)}),
    )
    # Status only moves through the approve / reject actions.
    readonly_fields = ("user", "status", "processed_by", "processed_at", "created_at")

    @display(
        description=_("durum"),
        label={"beklemede": "warning", "onaylandı": "success", "reddedildi": "danger"},
    )
    def status_badge(self, obj: DealerApplication) -> str:
        return obj.get_status_display()

    @action(description=_("Seçili başvuruları onayla"))
    def approve_selected(self, request, queryset):
        self._process(request, queryset, DealerService.approve, _("Onaylanan başvuru: %(n)s"))

    @action(description=_("Seçili başvuruları reddet"))
    def reject_selected(self, request, queryset):
        self._process(request, queryset, DealerService.reject, _("Reddedilen başvuru: %(n)s"))

    def _process(self, request, queryset, operation, success_message):
        done = 0
        for application in queryset:
            try:
                operation(application.pk, actor=request.user.username)
            except DealerError as exc:
                self.message_user(request, f"{application.company_name}: {exc.message}", level="warning")
                continue
            done += 1
        if done:
            self.message_user(request, success_message % {"n": done})


# =============================================================================
# CART
# =============================================================================


class CartItemInline(TabularInline):
    model = CartItem
    extra = 0
    fields = ("variant", "quantity", "updated_at")
    readonly_fields = ("updated_at",)
    autocomplete_fields = ("variant",)


@admin.register(Cart)
class CartAdmin(ModelAdmin):
    list_display = ("id", "user", "status_badge", "lines_count", "updated_at", "converted_at")
    list_filter = (("status", ChoicesRadioFilter),)
    search_fields = ("user__username", "user__email")
    ordering = ("-updated_at",)
    date_hierarchy = "created_at"
    list_filter_submit = True
    list_fullwidth = True

    inlines = [CartItemInline]
    readonly_fields = ("user", "status", "created_at", "updated_at", "converted_at")

    @display(description=_("durum"), label={"aktif": "info", "siparişe dönüştü": "success"})
    def status_badge(self, obj: Cart) -> str:
        return obj.get_status_display()

    @display(description=_("kalem"))
    def lines_count(self, obj: Cart) -> int:
        return obj.items.count()


# =============================================================================
# ORDERS
# =============================================================================


class OrderItemInline(TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = (
        "product_name_snapshot",
        "sku_snapshot",
        "quantity",
        "unit_price_snapshot",
        "line_total",
        "attributes_snapshot",
        "variant_id",
        "product_id",
    )
    fields = readonly_fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OrderEventInline(TabularInline):
    model = OrderEvent
    extra = 0
    readonly_fields = ("type", "actor", "payload", "created_at")
    can_delete = False
    ordering = ("-created_at", "-id")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(ModelAdmin):
    list_display = (
        "order_no",
        "user",
        "role",
        "status_badge",
        "total_display",
        "created_at",
    )
    list_filter = (("status", ChoicesRadioFilter), "role")
    search_fields = ("order_no", "user__username", "user__email")
    ordering = ("-created_at", "-id")
    date_hierarchy = "created_at"
    list_filter_submit = True
    list_fullwidth = True
    compressed_fields = True

    inlines = [OrderItemInline, OrderEventInline]

    actions_detail = [
        "mark_processing",
        "mark_shipped",
        "mark_delivered",
        "cancel_order",
        "refund_order",
        "history_detail_action",
    ]

    fieldsets = (
        (_("Sipariş"), {"fields": ("order_no", "user", "status", "role"), "classes": ("tab",)}),
        (
            _("Tutarlar"),
            {
                "fields": ("currency", "subtotal", "discount_total", "shipping_total", "grand_total"),
                "classes": ("tab",),
            },
        ),
        (_("Teslimat"), {"fields": ("shipping_address",), "classes": ("tab",)}),
        (_("Kayıt"), {"fields": ("cart", "created_at", "updated_at"), "classes": ("tab",)}),
    )
    # Orders are immutable snapshots; status moves only through the detail actions.
    readonly_fields = (
        "order_no",
        "user",
        "cart",
        "status",
        "role",
        "currency",
        "subtotal",
        "discount_total",
        "shipping_total",
        "grand_total",
        "shipping_address",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    @display(
        description=_("durum"),
        label={
            "ödeme bekleniyor": "warning",
            "sipariş alındı": "info",
            "hazırlanıyor": "warning",
            "kargolandı": "info",
            "teslim edildi": "success",
            "iptal edildi": "danger",
            "iade edildi": "danger",
        },
    )
    def status_badge(self, obj: Order) -> str:
        return obj.get_status_display()

    @display(description=_("toplam"))
    def total_display(self, obj: Order) -> str:
        return f"{obj.grand_total} {obj.currency}"

    @action(description=_("Geçmiş"), url_path="history-action", icon="history")
    def history_detail_action(self, request, object_id):
        return history_action(self, request, object_id)

    @action(description=_("Hazırlanıyor"), url_path="mark-processing", icon="inventory_2")
    def mark_processing(self, request, object_id):
        return self._transition(request, object_id, Order.Status.PROCESSING)

    @action(description=_("Kargolandı"), url_path="mark-shipped", icon="local_shipping")
    def mark_shipped(self, request, object_id):
        return self._transition(request, object_id, Order.Status.SHIPPED)

    @action(description=_("Teslim edildi"), url_path="mark-delivered", icon="check_circle")
    def mark_delivered(self, request, object_id):
        return self._transition(request, object_id, Order.Status.DELIVERED)

    @action(description=_("İptal et"), url_path="cancel", icon="cancel")
    def cancel_order(self, request, object_id):
        return self._transition(request, object_id, Order.Status.CANCELLED)

    @action(description=_("İade et"), url_path="refund", icon="undo")
    def refund_order(self, request, object_id):
        return self._transition(request, object_id, Order.Status.REFUNDED)

    def _transition(self, request, object_id, new_status: str):
        order = self.get_object(request, object_id)
        if order is None:
            self.message_user(request, _("Sipariş bulunamadı."), level="error")
            return HttpResponseRedirect(reverse("admin:orbis_order_changelist"))

        try:
            OrderService.transition(order, new_status, actor=request.user.username)
        except InvalidTransition as exc:
            logger.info("Admin transition refused for order %s: %s", order.order_no, exc.code)
            self.message_user(request, exc.message, level="error")
        else:
            self.message_user(request, _("Sipariş durumu güncellendi: %(status)s") % {"status": order.get_status_display()})

        return HttpResponseRedirect(reverse("admin:orbis_order_change", args=[object_id]))


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(ModelAdmin):
    list_display = ("scope", "key", "status_badge", "response_code", "expires_at", "created_at")
    list_filter = (("status", ChoicesRadioFilter),)
    search_fields = ("scope", "key")
    ordering = ("-created_at",)
    date_hierarchy = "created_at"
    list_filter_submit = True

    readonly_fields = ("scope", "key", "status", "response_code", "response_body", "expires_at", "created_at")

    @display(
        description=_("durum"),
        label={"devam ediyor": "warning", "tamamlandı": "success", "başarısız": "danger"},
    )
    def status_badge(self, obj: IdempotencyKey) -> str:
        return obj.get_status_display()
