"""
Tests for the stock gateway.

Covers:
- Success and failure envelopes (error codes and user-facing messages)
- Log context binding per call
- The full purchase -> receipt -> exit lifecycle through the gateway, on
  both store backends
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.logging_config import LogContext
from stock_services import OperationResult, StockGateway


@pytest.fixture
def gateway(store, deterministic_clock, config):
    return StockGateway(store, clock=deterministic_clock, config=config)


def _create_product(gateway, admin, **overrides):
    data = {"name": "P1", "supplier": "ACME", "unit_cost": "100", "unit_type": "unit"}
    data.update(overrides)
    result = gateway.create_product(actor=admin, **data)
    assert result.success, result.message
    return result.data


class TestResultEnvelope:

    def test_success(self, gateway, admin):
        result = gateway.create_product(
            name="P1", supplier="ACME", unit_cost="100", unit_type="unit", actor=admin,
        )
        assert isinstance(result, OperationResult)
        assert result.success
        assert not result.is_failure
        assert result.data.name == "P1"
        assert result.message == "Product created"
        assert result.error is None

    def test_validation_failure(self, gateway, admin):
        result = gateway.create_product(
            name="", supplier="ACME", unit_cost="100", unit_type="unit", actor=admin,
        )
        assert result.is_failure
        assert result.error == "VALIDATION_ERROR"
        assert "name" in result.message
        assert result.data is None

    def test_not_found(self, gateway):
        result = gateway.get_order(uuid4())
        assert result.error == "NOT_FOUND"

    def test_permission_denied(self, gateway, admin, user):
        product = _create_product(gateway, admin)
        order = gateway.create_order(
            order_number="PO-1", date=date(2024, 3, 1),
            items=[{"product_id": product.id, "quantity": 1}], actor=user,
        ).data

        result = gateway.approve_order(order.id, actor=user)

        assert result.error == "PERMISSION_DENIED"
        assert gateway.get_order(order.id).data.status.value == "pending"

    def test_duplicate_order_number(self, gateway, admin, user):
        product = _create_product(gateway, admin)
        items = [{"product_id": product.id, "quantity": 1}]
        gateway.create_order(order_number="PO-1", date="2024-03-01", items=items, actor=user)

        result = gateway.create_order(
            order_number="PO-1", date="2024-03-01", items=items, actor=user,
        )

        assert result.error == "DUPLICATE_ORDER_NUMBER"
        assert "PO-1" in result.message

    def test_unexpected_errors_propagate(self, gateway, admin):
        with pytest.raises(TypeError):
            gateway.create_product(actor=admin, colour="red")


class TestMissingFields:

    def test_order_without_items(self, gateway, user):
        result = gateway.create_order(actor=user, order_number="PO-1", date=date(2024, 3, 1))
        assert result.error == "VALIDATION_ERROR"
        assert "items" in result.message

    def test_product_without_unit_cost(self, gateway, admin):
        result = gateway.create_product(
            actor=admin, name="P1", supplier="ACME", unit_type="unit",
        )
        assert result.error == "VALIDATION_ERROR"
        assert "unit_cost" in result.message

    @pytest.mark.parametrize("missing", [
        "order_id", "date", "payment_method", "installments", "first_due_date", "invoices",
    ])
    def test_entry_without_field(self, gateway, admin, user, missing):
        product = _create_product(gateway, admin)
        order = gateway.create_order(
            order_number="PO-1", date=date(2024, 3, 1),
            items=[{"product_id": product.id, "quantity": 2}], actor=user,
        ).data
        gateway.approve_order(order.id, actor=admin)
        data = {
            "order_id": order.id,
            "date": date(2024, 3, 5),
            "payment_method": "pix",
            "installments": 1,
            "first_due_date": date(2024, 4, 5),
            "invoices": [{
                "invoice_number": "NF-1",
                "items": [{"order_item_id": order.items[0].id, "quantity": 2}],
            }],
        }
        del data[missing]

        result = gateway.create_stock_entry(actor=user, **data)

        assert result.is_failure
        assert result.error == "VALIDATION_ERROR"
        assert gateway.list_stock_entries().data == []

    @pytest.mark.parametrize("missing", ["stock_item_ids", "exit_date"])
    def test_exit_without_field(self, gateway, user, missing):
        data = {"stock_item_ids": [uuid4()], "exit_date": date(2024, 3, 10)}
        del data[missing]

        result = gateway.create_stock_exit(actor=user, **data)

        assert result.error == "VALIDATION_ERROR"
        assert result.is_failure


class TestStringIds:

    def test_get_order_by_string_id(self, gateway, admin, user):
        product = _create_product(gateway, admin)
        order = gateway.create_order(
            order_number="PO-1", date=date(2024, 3, 1),
            items=[{"product_id": str(product.id), "quantity": 1}], actor=user,
        ).data

        result = gateway.get_order(str(order.id))

        assert result.success
        assert result.data.id == order.id

    def test_approve_and_delete_by_string_id(self, gateway, admin, user):
        product = _create_product(gateway, admin)
        order = gateway.create_order(
            order_number="PO-1", date=date(2024, 3, 1),
            items=[{"product_id": product.id, "quantity": 1}], actor=user,
        ).data

        assert gateway.approve_order(str(order.id), actor=admin).success
        assert gateway.get_product(str(product.id)).data.id == product.id
        assert gateway.delete_product(str(product.id), actor=admin).success
        assert gateway.list_products().data == []

    def test_malformed_id(self, gateway):
        result = gateway.get_order("not-an-id")
        assert result.error == "VALIDATION_ERROR"


class TestLogContext:

    def test_failure_logged_with_context(self, gateway, user, captured_logs):
        gateway.approve_order(uuid4(), actor=user)

        failed = [r for r in captured_logs() if r["message"] == "operation_failed"]
        assert failed[-1]["error_code"] == "PERMISSION_DENIED"
        assert failed[-1]["operation"] == "approve_order"
        assert failed[-1]["actor_id"] == str(user.id)
        assert failed[-1]["correlation_id"]

    def test_service_logs_share_correlation_id(self, gateway, admin, captured_logs):
        _create_product(gateway, admin)

        records = [
            r for r in captured_logs()
            if r.get("operation") == "create_product"
        ]
        assert {r["message"] for r in records} >= {"catalog_product_created", "operation_succeeded"}
        assert len({r["correlation_id"] for r in records}) == 1

    def test_context_cleared_after_call(self, gateway, admin):
        _create_product(gateway, admin)
        assert LogContext.get_all() == {}


class TestLifecycle:

    def test_order_to_exit(self, gateway, admin, user):
        product = _create_product(gateway, admin)

        order = gateway.create_order(
            order_number="PO-1", date="2024-03-01",
            items=[{"product_id": product.id, "quantity": 10}], actor=user,
        ).data
        assert order.status.value == "pending"

        order = gateway.approve_order_item(order.id, order.items[0].id, actor=admin).data
        assert order.status.value == "approved"

        entry_result = gateway.create_stock_entry(
            order_id=order.id,
            date=date(2024, 3, 5),
            payment_method="boleto",
            installments=1,
            first_due_date=date(2024, 4, 5),
            invoices=[{
                "invoice_number": "NF-1001",
                "items": [{"order_item_id": order.items[0].id, "quantity": 10,
                           "adjusted_unit_cost": "110"}],
            }],
            actor=user,
        )
        assert entry_result.success, entry_result.message
        entry = entry_result.data
        assert entry.total_value == Decimal("1100")

        units = gateway.available_stock_items(product_id=product.id).data
        assert len(units) == 10
        schedule = gateway.list_installments(stock_entry_id=entry.id).data
        assert [(i.value, i.due_date) for i in schedule] == [(Decimal("1100"), date(2024, 4, 5))]

        before = gateway.dashboard_stats().data
        stock_exit = gateway.create_stock_exit(
            stock_item_ids=[u.id for u in units[:3]], exit_date="2024-03-10", actor=user,
        ).data
        after = gateway.dashboard_stats().data

        counts = gateway.stock_counts().data
        assert (counts.available, counts.exited) == (7, 3)
        assert before.total_stock_value - after.total_stock_value == Decimal("330")
        assert stock_exit.total_cost == Decimal("330")

        confirmed = gateway.confirm_stock_exit(stock_exit.id, actor=admin)
        assert confirmed.success
        again = gateway.confirm_stock_exit(stock_exit.id, actor=admin)
        assert again.error == "EXIT_ALREADY_CONFIRMED"

        report = gateway.stock_report().data
        assert report.rows[0].quantity == 7
        assert report.grand_total == Decimal("770")

    def test_over_receipt_reported(self, gateway, admin, user):
        product = _create_product(gateway, admin)
        order = gateway.create_order(
            order_number="PO-1", date="2024-03-01",
            items=[{"product_id": product.id, "quantity": 2}], actor=user,
        ).data
        order = gateway.approve_order(order.id, actor=admin).data

        result = gateway.create_stock_entry(
            order_id=order.id, date="2024-03-05", payment_method="pix",
            installments=1, first_due_date="2024-03-05",
            invoices=[{
                "invoice_number": "NF-1",
                "items": [{"order_item_id": order.items[0].id, "quantity": 3}],
            }],
            actor=user,
        )

        assert result.error == "OVER_RECEIPT"
        assert gateway.list_stock_entries().data == []
        assert gateway.receivable_items(order.id).data[0].remaining == 2

    def test_installment_payment(self, gateway, admin, user):
        product = _create_product(gateway, admin, unit_cost="10")
        order = gateway.create_order(
            order_number="PO-1", date="2024-03-01",
            items=[{"product_id": product.id, "quantity": 3}], actor=user,
        ).data
        gateway.approve_order(order.id, actor=admin)
        entry = gateway.create_stock_entry(
            order_id=order.id, date="2024-03-05", payment_method="credit_card",
            installments=3, first_due_date="2024-03-05",
            invoices=[{
                "invoice_number": "NF-1",
                "items": [{"order_item_id": order.items[0].id, "quantity": 3}],
            }],
            actor=user,
        ).data

        first = gateway.list_installments(stock_entry_id=entry.id).data[0]
        assert gateway.mark_installment_paid(first.id, actor=user).success
        again = gateway.mark_installment_paid(first.id, actor=user)

        assert again.error == "INSTALLMENT_ALREADY_PAID"
        summary = gateway.installment_summary(as_of=date(2024, 3, 6)).data
        assert summary.total_paid == Decimal("10")
        assert summary.total_pending == Decimal("20")


class TestForSession:

    def test_gateway_over_session(self, sqlite_session, admin):
        clock = DeterministicClock()
        gateway = StockGateway.for_session(sqlite_session, clock=clock)

        _create_product(gateway, admin)

        assert [p.name for p in gateway.list_products().data] == ["P1"]
