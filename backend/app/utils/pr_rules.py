from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Protocol, FrozenSet


class PRStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ORDERED = "ordered"
    PARTIALLY_RECEIVED = "partially_received"
    FULLY_RECEIVED = "fully_received"


class PRPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class PRItemStatus(str, Enum):
    PENDING = "pending"
    PARTIALLY_RECEIVED = "partially_received"
    RECEIVED = "received"


class Urgency(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    TOMORROW = "tomorrow"
    UPCOMING = "upcoming"


class ReceivableLine(Protocol):
    quantity: int
    received_quantity: int


# Statuses a PR waits in for deliveries (dashboard queries)
OPEN_DELIVERY_STATUSES: FrozenSet[PRStatus] = frozenset({
    PRStatus.APPROVED,
    PRStatus.ORDERED,
    PRStatus.PARTIALLY_RECEIVED,
})


def receivable_statuses(requires_approval: bool = True) -> FrozenSet[PRStatus]:
    """
    Statuses from which goods may be received.

    Approval workflow: approved and partially_received. Without approval the
    PR starts out as ordered, which is receivable as well.
    """
    statuses = {PRStatus.APPROVED, PRStatus.PARTIALLY_RECEIVED}
    if not requires_approval:
        statuses.add(PRStatus.ORDERED)
    return frozenset(statuses)


def derive_status(items: Iterable[ReceivableLine], base: PRStatus = PRStatus.APPROVED) -> PRStatus:
    """
    Recompute a PR's status from its lines after a receive.

    Returns:
        fully_received when every line has received_quantity >= quantity,
        partially_received when any line has received something,
        otherwise ``base`` (the status the PR was receivable from).
    """
    items = list(items)
    if all((item.received_quantity or 0) >= item.quantity for item in items):
        return PRStatus.FULLY_RECEIVED
    if any((item.received_quantity or 0) > 0 for item in items):
        return PRStatus.PARTIALLY_RECEIVED
    return base


def derive_line_status(item: ReceivableLine) -> PRItemStatus:
    received = item.received_quantity or 0
    if received >= item.quantity:
        return PRItemStatus.RECEIVED
    if received > 0:
        return PRItemStatus.PARTIALLY_RECEIVED
    return PRItemStatus.PENDING


def classify_urgency(required_date: date, today: date, include_tomorrow: bool = False) -> Urgency:
    """
    Classify a required date relative to today for dashboard ordering.

    ``include_tomorrow`` enables the separate "tomorrow" bucket; without it
    tomorrow counts as upcoming.
    """
    if required_date < today:
        return Urgency.OVERDUE
    if required_date == today:
        return Urgency.TODAY
    if include_tomorrow and required_date == today + timedelta(days=1):
        return Urgency.TOMORROW
    return Urgency.UPCOMING


def line_total(quantity: int, unit_cost) -> float:
    """quantity x unit cost, with a missing cost counted as 0"""
    return float(quantity * (unit_cost or 0))
