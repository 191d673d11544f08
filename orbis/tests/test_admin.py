from __future__ import annotations

from django.contrib import admin
from django.contrib.messages.storage.fallback import FallbackStorage
from django.test import RequestFactory, TestCase
from django.urls import reverse
from unfold.sites import UnfoldAdminSite

from orbis.admin import DealerApplicationAdmin, OrderAdmin
from orbis.models import DealerApplication, Order, Profile
from orbis.services import DealerService

from .helpers import APPLICATION, CatalogFixturesMixin


class AdminActionTests(CatalogFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.staff = self.make_user("staff", is_staff=True, is_superuser=True)
        self.customer = self.make_user("customer")

    def _request(self):
        request = RequestFactory().post("/admin/")
        request.user = self.staff
        request.session = {}
        request._messages = FallbackStorage(request)
        return request

    def test_order_detail_action_moves_status(self) -> None:
        order = Order.objects.create(order_no="ORB-20260001", user=self.customer, subtotal=10, grand_total=10)
        model_admin = OrderAdmin(Order, admin.site)

        response = model_admin._transition(self._request(), str(order.pk), Order.Status.PROCESSING)

        self.assertEqual(response.status_code, 302)
        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.PROCESSING)
        self.assertEqual(order.events.get(type="status_changed").actor, "staff")

    def test_order_detail_action_refuses_invalid_move(self) -> None:
        order = Order.objects.create(order_no="ORB-20260002", user=self.customer, subtotal=10, grand_total=10)
        model_admin = OrderAdmin(Order, admin.site)

        model_admin._transition(self._request(), str(order.pk), Order.Status.DELIVERED)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.Status.PENDING_PAYMENT)

    def test_bulk_dealer_approval(self) -> None:
        DealerService.apply(self.customer, **APPLICATION)
        model_admin = DealerApplicationAdmin(DealerApplication, admin.site)

        model_admin._process(
            self._request(),
            DealerApplication.objects.all(),
            DealerService.approve,
            "%(n)s",
        )

        self.assertEqual(Profile.objects.get(user=self.customer).role, "b2b")
        self.assertEqual(DealerApplication.objects.get().processed_by, "staff")


class AdminRegistryTests(TestCase):
    def test_orbis_models_are_mounted_on_the_unfold_site(self) -> None:
        self.assertIsInstance(admin.site, UnfoldAdminSite)
        for model in (Order, DealerApplication, Profile):
            self.assertIn(model, admin.site._registry)

    def test_order_change_url_resolves(self) -> None:
        self.assertEqual(reverse("admin:orbis_order_change", args=[1]), "/admin/orbis/order/1/change/")
