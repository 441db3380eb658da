from datetime import date
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from app.exceptions import NotFoundError, ValidationError
from app.models import InventoryLot, PurchaseOrder, PurchaseRequisition, StockTransaction, StoreItem
from app.services.stock_ledger import StockLedger
from app.utils.id_generator import SequenceIdGenerator
from app.utils.pr_rules import PRStatus

from conftest import numbers, receive_request


def stock(db, store_id, master_item_id):
    store_item = db.query(StoreItem).filter(
        StoreItem.store_id == store_id,
        StoreItem.master_item_id == master_item_id
    ).first()
    return store_item.quantity if store_item else 0


def test_create_then_get_returns_the_line(db, seed, workflow, create_pr):
    created = create_pr(workflow, lines=((5, 10, 2.0),))

    assert created.pr_number == "PR-20250114-0001"

    pr = workflow.get_pr_by_id(created.id, db)
    assert pr.status == PRStatus.PENDING.value
    assert pr.store_name == "Main Store"
    assert pr.department_name == "Operations"
    assert pr.requester_name == "Jordan Doe"
    assert len(pr.items) == 1
    item = pr.items[0]
    assert item.master_item_id == 5
    assert item.quantity == 10
    assert item.received_quantity == 0
    assert item.estimated_unit_cost == 2.0
    assert item.sku == "SKU-00005"


def test_create_without_approval_starts_ordered(db, seed, make_workflow, create_pr):
    service = make_workflow(requires_purchase_order=False, requires_approval=False)
    created = create_pr(service)
    assert service.get_pr_by_id(created.id, db).status == PRStatus.ORDERED.value


def test_duplicate_pr_number_is_rejected_by_the_database(db, seed, make_workflow, create_pr):
    service = make_workflow(pr_numbers=SequenceIdGenerator(["PR-20250114-0001", "PR-20250114-0001"]))
    create_pr(service)

    with pytest.raises(IntegrityError):
        create_pr(service)

    assert db.query(PurchaseRequisition).count() == 1


def test_create_notifies_approvers(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    service = make_workflow(notifier=notifier)
    create_pr(service)
    notifier.pending_approval.assert_called_once()


def test_create_without_approval_sends_no_approval_request(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    service = make_workflow(requires_approval=False, notifier=notifier)
    create_pr(service)
    notifier.pending_approval.assert_not_called()


def test_approve_sets_approver_metadata(db, seed, workflow, create_pr):
    created = create_pr(workflow)

    assert workflow.approve_pr(created.id, seed.manager.id, db) is True

    pr = workflow.get_pr_by_id(created.id, db)
    assert pr.status == PRStatus.APPROVED.value
    assert pr.approved_by == seed.manager.id
    assert pr.approver_name == "Morgan Lee"
    assert pr.approved_at is not None
    assert pr.notes == "Monthly restock"


def test_approve_with_notes_overwrites_notes(db, seed, workflow, create_pr):
    created = create_pr(workflow)
    workflow.approve_pr(created.id, seed.manager.id, db, notes="Use preferred vendor")
    assert workflow.get_pr_by_id(created.id, db).notes == "Use preferred vendor"


def test_approve_then_reject_overwrites_status_and_approver(db, seed, workflow, create_pr):
    created = create_pr(workflow)
    workflow.approve_pr(created.id, seed.manager.id, db)

    assert workflow.reject_pr(created.id, seed.admin.id, "Duplicate request", db) is True

    pr = workflow.get_pr_by_id(created.id, db)
    assert pr.status == PRStatus.REJECTED.value
    assert pr.approved_by == seed.admin.id
    assert pr.notes == "Duplicate request"


def test_reject_requires_reason(db, seed, workflow, create_pr):
    created = create_pr(workflow)
    with pytest.raises(ValidationError):
        workflow.reject_pr(created.id, seed.manager.id, "   ", db)
    assert workflow.get_pr_by_id(created.id, db).status == PRStatus.PENDING.value


def test_approve_unknown_pr(db, seed, workflow):
    with pytest.raises(NotFoundError):
        workflow.approve_pr(999, seed.manager.id, db)


def test_approve_and_reject_notify_requester(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    service = make_workflow(notifier=notifier)
    created = create_pr(service)

    service.approve_pr(created.id, seed.manager.id, db)
    service.reject_pr(created.id, seed.manager.id, "Over budget", db)

    assert notifier.pr_approved.call_args[0][2] == "Morgan Lee"
    assert notifier.pr_rejected.call_args[0][3] == "Over budget"


def test_receive_partial_then_full(db, seed, workflow, approved_pr):
    first, second = approved_pr.items

    result = workflow.receive_goods(approved_pr.id, receive_request((first.id, 10, 3.25)), db)
    assert result.status == PRStatus.PARTIALLY_RECEIVED
    assert result.po_number == "PO-1001"
    assert len(result.receive_records) == 1
    assert result.receive_records[0].lot_number == "LOT-20250114-0001"
    assert result.receive_records[0].unit_cost == 3.25

    result = workflow.receive_goods(approved_pr.id, receive_request((second.id, 5, 11.0)), db)
    assert result.status == PRStatus.FULLY_RECEIVED

    pr = workflow.get_pr_by_id(approved_pr.id, db)
    assert pr.status == PRStatus.FULLY_RECEIVED.value
    assert [item.received_quantity for item in pr.items] == [10, 5]
    assert [item.status for item in pr.items] == ["received", "received"]
    assert stock(db, seed.store.id, 1) == 10
    assert stock(db, seed.store.id, 2) == 5


def test_receive_records_po_lot_and_transactions(db, seed, workflow, approved_pr):
    first = approved_pr.items[0]
    workflow.receive_goods(
        approved_pr.id,
        receive_request((first.id, 4, 3.0), received_date=date(2025, 1, 14),
                        invoice_number="INV-77", user_id=seed.manager.id),
        db
    )

    po = db.query(PurchaseOrder).one()
    assert po.po_number == "PO-1001"
    assert po.pr_id == approved_pr.id
    assert po.supplier_name == "Acme Supplies"
    assert po.status == "received"
    assert po.order_date == date(2025, 1, 14)
    assert po.actual_delivery_date == date(2025, 1, 14)
    assert po.created_by == seed.manager.id

    lot = db.query(InventoryLot).one()
    assert lot.po_id == po.id
    assert lot.pr_id == approved_pr.id
    assert lot.invoice_number == "INV-77"
    assert lot.total_cost == 12.0

    transaction = db.query(StockTransaction).one()
    assert transaction.reference_type == "po"
    assert transaction.reference_number == "PO-1001"
    assert transaction.user_id == seed.manager.id


def test_receive_exact_shortfall_completes_line(db, seed, workflow, approved_pr):
    first, second = approved_pr.items
    workflow.receive_goods(approved_pr.id, receive_request((first.id, 6), (second.id, 5)), db)
    result = workflow.receive_goods(approved_pr.id, receive_request((first.id, 4)), db)

    assert result.status == PRStatus.FULLY_RECEIVED
    assert stock(db, seed.store.id, 1) == 10


def test_over_receipt_is_rejected_without_side_effects(db, seed, workflow, approved_pr):
    first = approved_pr.items[0]
    workflow.receive_goods(approved_pr.id, receive_request((first.id, 6)), db)

    with pytest.raises(ValidationError):
        workflow.receive_goods(approved_pr.id, receive_request((first.id, 5), po_number="PO-1002"), db)

    pr = workflow.get_pr_by_id(approved_pr.id, db)
    assert pr.items[0].received_quantity == 6
    assert pr.status == PRStatus.PARTIALLY_RECEIVED.value
    assert stock(db, seed.store.id, 1) == 6
    assert db.query(PurchaseOrder).count() == 1


def test_duplicate_lines_in_one_call_count_together(db, seed, workflow, approved_pr):
    first = approved_pr.items[0]
    with pytest.raises(ValidationError):
        workflow.receive_goods(approved_pr.id, receive_request((first.id, 6), (first.id, 6)), db)
    assert stock(db, seed.store.id, 1) == 0


def test_failing_line_rolls_back_earlier_lines(db, seed, workflow, approved_pr):
    first, second = approved_pr.items
    with pytest.raises(ValidationError):
        workflow.receive_goods(approved_pr.id, receive_request((first.id, 10), (second.id, 0)), db)

    assert stock(db, seed.store.id, 1) == 0
    assert db.query(InventoryLot).count() == 0
    assert db.query(PurchaseOrder).count() == 0
    assert workflow.get_pr_by_id(approved_pr.id, db).status == PRStatus.APPROVED.value


def test_error_mid_receive_rolls_back_every_write(db, seed, make_workflow, create_pr):
    # only one lot number available; the second line fails inside the transaction
    service = make_workflow(ledger=StockLedger(lot_numbers=SequenceIdGenerator(["LOT-20250114-0001"])))
    created = create_pr(service, lines=((1, 10, 3.5), (2, 5, 12.0)))
    service.approve_pr(created.id, seed.manager.id, db)
    first, second = service.get_pr_by_id(created.id, db).items

    with pytest.raises(RuntimeError):
        service.receive_goods(created.id, receive_request((first.id, 10), (second.id, 5)), db)

    pr = service.get_pr_by_id(created.id, db)
    assert pr.status == PRStatus.APPROVED.value
    assert [item.received_quantity for item in pr.items] == [0, 0]
    assert stock(db, seed.store.id, 1) == 0
    assert db.query(InventoryLot).count() == 0
    assert db.query(StockTransaction).count() == 0
    assert db.query(PurchaseOrder).count() == 0


def test_negative_unit_cost_is_rejected(db, seed, workflow, approved_pr):
    first = approved_pr.items[0]
    with pytest.raises(ValidationError):
        workflow.receive_goods(approved_pr.id, receive_request((first.id, 1, -2.0)), db)


@pytest.mark.parametrize("field", ["po_number", "supplier_name"])
def test_receive_requires_po_number_and_supplier(db, seed, workflow, approved_pr, field):
    first = approved_pr.items[0]
    request = receive_request((first.id, 5), **{field: ""})

    with pytest.raises(ValidationError):
        workflow.receive_goods(approved_pr.id, request, db)

    assert stock(db, seed.store.id, 1) == 0
    assert db.query(PurchaseOrder).count() == 0
    assert db.query(InventoryLot).count() == 0


def test_receive_pending_pr_fails(db, seed, workflow, create_pr):
    created = create_pr(workflow)
    item = workflow.get_pr_by_id(created.id, db).items[0]

    with pytest.raises(ValidationError, match="approved"):
        workflow.receive_goods(created.id, receive_request((item.id, 1)), db)


def test_receive_rejected_pr_fails(db, seed, workflow, create_pr):
    created = create_pr(workflow)
    workflow.reject_pr(created.id, seed.manager.id, "No budget", db)
    item = workflow.get_pr_by_id(created.id, db).items[0]

    with pytest.raises(ValidationError):
        workflow.receive_goods(created.id, receive_request((item.id, 1)), db)


def test_receive_unknown_pr(db, seed, workflow):
    with pytest.raises(NotFoundError):
        workflow.receive_goods(999, receive_request((1, 1)), db)


def test_same_po_number_reuses_purchase_order(db, seed, workflow, approved_pr):
    first, second = approved_pr.items
    workflow.receive_goods(approved_pr.id, receive_request((first.id, 5), received_date=date(2025, 1, 14)), db)
    workflow.receive_goods(approved_pr.id, receive_request((second.id, 5), received_date=date(2025, 1, 20)), db)

    po = db.query(PurchaseOrder).one()
    assert po.actual_delivery_date == date(2025, 1, 20)
    assert po.order_date == date(2025, 1, 14)
    assert len(workflow.get_pos_by_pr(approved_pr.id, db)) == 1


def test_get_pos_by_unknown_pr(db, seed, workflow):
    with pytest.raises(NotFoundError):
        workflow.get_pos_by_pr(999, db)


def test_unknown_lines_are_skipped(db, seed, workflow, approved_pr):
    first = approved_pr.items[0]
    result = workflow.receive_goods(approved_pr.id, receive_request((first.id, 2), (9999, 3)), db)

    assert [record.pr_item_id for record in result.receive_records] == [first.id]
    assert result.status == PRStatus.PARTIALLY_RECEIVED


def test_only_unknown_lines_leave_status_unchanged(db, seed, workflow, approved_pr):
    result = workflow.receive_goods(approved_pr.id, receive_request((9999, 3)), db)
    assert result.status == PRStatus.APPROVED
    assert result.receive_records == []


def test_unknown_lines_rejected_in_strict_mode(db, seed, make_workflow, create_pr):
    service = make_workflow(reject_unknown_lines=True)
    created = create_pr(service)
    service.approve_pr(created.id, seed.manager.id, db)
    item = service.get_pr_by_id(created.id, db).items[0]

    with pytest.raises(ValidationError):
        service.receive_goods(created.id, receive_request((item.id, 2), (9999, 3)), db)
    assert stock(db, seed.store.id, 5) == 0


def test_line_from_another_pr_is_not_received(db, seed, workflow, create_pr, approved_pr):
    other = create_pr(workflow, lines=((3, 4, 1.0),))
    workflow.approve_pr(other.id, seed.manager.id, db)
    other_item = workflow.get_pr_by_id(other.id, db).items[0]

    result = workflow.receive_goods(approved_pr.id, receive_request((other_item.id, 4)), db)

    assert result.receive_records == []
    assert stock(db, seed.store.id, 3) == 0


def test_received_quantity_alias(db, seed, workflow, approved_pr):
    from app.schemas.pr import ReceiveGoodsRequest, ReceiveItem

    first = approved_pr.items[0]
    request = ReceiveGoodsRequest(
        po_number="PO-1001",
        supplier_name="Acme Supplies",
        items=[ReceiveItem(pr_item_id=first.id, received_quantity=3)]
    )
    result = workflow.receive_goods(approved_pr.id, request, db)
    assert result.receive_records[0].quantity == 3


def test_receive_notifies_requester(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    service = make_workflow(notifier=notifier)
    created = create_pr(service)
    service.approve_pr(created.id, seed.manager.id, db)
    item = service.get_pr_by_id(created.id, db).items[0]

    service.receive_goods(created.id, receive_request((item.id, 10)), db)

    args = notifier.pr_received.call_args[0]
    assert args[2] == PRStatus.FULLY_RECEIVED.value
    assert args[3] == "PO-1001"


def test_failing_notifier_does_not_fail_a_committed_receive(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    notifier.pr_received.side_effect = RuntimeError("notifier down")
    service = make_workflow(notifier=notifier)
    created = create_pr(service)
    service.approve_pr(created.id, seed.manager.id, db)
    item = service.get_pr_by_id(created.id, db).items[0]

    result = service.receive_goods(created.id, receive_request((item.id, 4)), db)

    assert result.status == PRStatus.PARTIALLY_RECEIVED
    assert notifier.pr_received.called
    assert stock(db, seed.store.id, item.master_item_id) == 4
    pr = service.get_pr_by_id(created.id, db)
    assert pr.items[0].received_quantity == 4
    assert db.query(InventoryLot).count() == 1


def test_failing_notifier_does_not_fail_approval(db, seed, make_workflow, create_pr):
    notifier = MagicMock()
    notifier.pr_approved.side_effect = RuntimeError("notifier down")
    service = make_workflow(notifier=notifier)
    created = create_pr(service)

    assert service.approve_pr(created.id, seed.manager.id, db) is True
    assert service.get_pr_by_id(created.id, db).status == PRStatus.APPROVED.value


@pytest.fixture
def direct_workflow(make_workflow):
    return make_workflow(requires_purchase_order=False, requires_approval=False)


def test_direct_receive_without_po(db, seed, direct_workflow, create_pr):
    created = create_pr(direct_workflow, lines=((4, 8, 1.5),))
    item = direct_workflow.get_pr_by_id(created.id, db).items[0]

    result = direct_workflow.receive_from_pr(
        created.id,
        receive_request((item.id, 3), po_number=None, supplier_name=None),
        db
    )

    assert result.status == PRStatus.PARTIALLY_RECEIVED
    assert result.po_number is None
    assert db.query(PurchaseOrder).count() == 0
    transaction = db.query(StockTransaction).one()
    assert transaction.reference_type == "pr"
    assert transaction.reference_number == created.pr_number
    assert stock(db, seed.store.id, 4) == 3


def test_direct_receive_falls_back_to_estimated_cost(db, seed, direct_workflow, create_pr):
    created = create_pr(direct_workflow, lines=((4, 8, 1.5),))
    item = direct_workflow.get_pr_by_id(created.id, db).items[0]

    result = direct_workflow.receive_from_pr(created.id, receive_request((item.id, 8), po_number=None), db)

    assert result.status == PRStatus.FULLY_RECEIVED
    assert result.receive_records[0].unit_cost == 1.5
    assert db.query(InventoryLot).one().total_cost == 12.0


def test_direct_receive_with_nothing_received_keeps_ordered(db, seed, direct_workflow, create_pr):
    created = create_pr(direct_workflow)
    result = direct_workflow.receive_from_pr(created.id, receive_request(po_number=None), db)
    assert result.status == PRStatus.ORDERED


def test_lot_numbers_come_from_the_injected_generator(db, seed, make_workflow, create_pr):
    service = make_workflow(ledger=StockLedger(lot_numbers=numbers("BATCH")))
    created = create_pr(service)
    service.approve_pr(created.id, seed.manager.id, db)
    item = service.get_pr_by_id(created.id, db).items[0]

    result = service.receive_goods(created.id, receive_request((item.id, 1)), db)
    assert result.receive_records[0].lot_number == "BATCH-20250114-0001"
