from __future__ import annotations

from django.test import SimpleTestCase, override_settings
from django.utils import timezone

from orbis.ids import generate_idempotency_key, generate_order_no
from orbis.monetary import monetary_mult, to_money


class OrderNumberTests(SimpleTestCase):
    def test_format(self) -> None:
        order_no = generate_order_no()
        year = timezone.localdate().year

        self.assertRegex(order_no, rf"^ORB-{year}\d{{4}}$")
        self.assertTrue(1000 <= int(order_no[-4:]) <= 9999)

    @override_settings(ORBIS={"ORDER_NUMBER_PREFIX": "TST"})
    def test_prefix_is_configurable(self) -> None:
        self.assertTrue(generate_order_no().startswith("TST-"))

    def test_idempotency_key(self) -> None:
        key = generate_idempotency_key()
        self.assertTrue(key.startswith("CHK-"))
        self.assertNotEqual(key, generate_idempotency_key())


class MonetaryTests(SimpleTestCase):
    def test_to_money_rounds_half_up(self) -> None:
        self.assertEqual(str(to_money("10.005")), "10.01")
        self.assertEqual(str(to_money(3)), "3.00")
        self.assertEqual(str(to_money(None)), "0.00")

    def test_line_total(self) -> None:
        self.assertEqual(str(monetary_mult(3, "33.33")), "99.99")
