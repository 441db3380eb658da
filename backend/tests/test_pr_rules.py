from datetime import date
from types import SimpleNamespace

from app.utils.pr_rules import (
    PRItemStatus,
    PRStatus,
    Urgency,
    classify_urgency,
    derive_line_status,
    derive_status,
    line_total,
    receivable_statuses,
)


def line(quantity, received):
    return SimpleNamespace(quantity=quantity, received_quantity=received)


def test_derive_status_fully_received_when_every_line_complete():
    assert derive_status([line(10, 10), line(5, 5)]) == PRStatus.FULLY_RECEIVED


def test_derive_status_partial_when_any_line_has_receipts():
    assert derive_status([line(10, 10), line(5, 0)]) == PRStatus.PARTIALLY_RECEIVED
    assert derive_status([line(10, 3), line(5, 0)]) == PRStatus.PARTIALLY_RECEIVED


def test_derive_status_falls_back_to_base_when_nothing_received():
    assert derive_status([line(10, 0), line(5, 0)]) == PRStatus.APPROVED
    assert derive_status([line(10, 0)], base=PRStatus.ORDERED) == PRStatus.ORDERED


def test_derive_status_treats_missing_received_quantity_as_zero():
    assert derive_status([line(10, None)]) == PRStatus.APPROVED


def test_derive_status_empty_pr_counts_as_fully_received():
    assert derive_status([]) == PRStatus.FULLY_RECEIVED


def test_derive_line_status():
    assert derive_line_status(line(10, 0)) == PRItemStatus.PENDING
    assert derive_line_status(line(10, 4)) == PRItemStatus.PARTIALLY_RECEIVED
    assert derive_line_status(line(10, 10)) == PRItemStatus.RECEIVED


def test_receivable_statuses_with_approval():
    statuses = receivable_statuses(requires_approval=True)
    assert statuses == {PRStatus.APPROVED, PRStatus.PARTIALLY_RECEIVED}
    assert PRStatus.PENDING not in statuses
    assert PRStatus.REJECTED not in statuses


def test_receivable_statuses_without_approval_include_ordered():
    assert PRStatus.ORDERED in receivable_statuses(requires_approval=False)


def test_classify_urgency():
    today = date(2025, 1, 14)
    assert classify_urgency(date(2025, 1, 10), today) == Urgency.OVERDUE
    assert classify_urgency(today, today) == Urgency.TODAY
    assert classify_urgency(date(2025, 1, 15), today) == Urgency.UPCOMING
    assert classify_urgency(date(2025, 1, 15), today, include_tomorrow=True) == Urgency.TOMORROW
    assert classify_urgency(date(2025, 1, 20), today, include_tomorrow=True) == Urgency.UPCOMING


def test_line_total_counts_missing_cost_as_zero():
    assert line_total(4, 2.5) == 10.0
    assert line_total(4, None) == 0.0
