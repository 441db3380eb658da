"""
PR Repository - data access for purchase requisitions, their lines and POs.

Read methods return response schemas enriched with store, department, user
and catalog names; ``get_pr`` returns the ORM aggregate for the workflow to
mutate.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from app.config import settings
from app.models.pr_item import PRItem
from app.models.purchase_order import PurchaseOrder
from app.models.purchase_requisition import PurchaseRequisition
from app.models.store import Store
from app.schemas.pr import (
    PRItemCreate,
    PRItemResponse,
    PRDetailResponse,
    PRListResponse,
    PurchaseOrderResponse,
    PendingApprovalEntry,
    DeliveryEntry,
)
from app.utils.pr_rules import (
    OPEN_DELIVERY_STATUSES,
    PRItemStatus,
    PRStatus,
    classify_urgency,
    line_total,
)

logger = logging.getLogger(__name__)


def _estimated_total(pr: PurchaseRequisition) -> float:
    return sum(line_total(item.quantity, item.estimated_unit_cost) for item in pr.items)


def _days_between(start, end: date) -> Optional[int]:
    if start is None:
        return None
    if isinstance(start, datetime):
        start = start.date()
    return (end - start).days


class PRRepository:
    """Queries and inserts over purchase_requisitions / pr_items / purchase_orders"""

    def _with_names(self, query):
        return query.options(
            joinedload(PurchaseRequisition.store).joinedload(Store.department),
            joinedload(PurchaseRequisition.requester),
            joinedload(PurchaseRequisition.approver),
            selectinload(PurchaseRequisition.items).joinedload(PRItem.master_item),
        )

    def create_pr(
        self,
        db: Session,
        pr_number: str,
        status: PRStatus,
        store_id: int,
        requester_id: int,
        priority: str,
        required_date: Optional[date],
        notes: Optional[str],
        lines: Iterable[PRItemCreate]
    ) -> PurchaseRequisition:
        """
        Insert a PR and its lines. Flushes only; the caller commits.

        A duplicate pr_number raises IntegrityError at flush.
        """
        pr = PurchaseRequisition(
            pr_number=pr_number,
            store_id=store_id,
            requester_id=requester_id,
            status=status.value,
            priority=priority,
            required_date=required_date,
            notes=notes
        )
        db.add(pr)
        db.flush()  # Get the ID

        for line in lines:
            db.add(PRItem(
                pr_id=pr.id,
                master_item_id=line.master_item_id,
                quantity=line.quantity,
                estimated_unit_cost=line.estimated_unit_cost or 0,
                notes=line.notes,
                status=PRItemStatus.PENDING.value,
                received_quantity=0
            ))
        db.flush()
        return pr

    def find_po(self, db: Session, pr_id: int, po_number: str) -> Optional[PurchaseOrder]:
        return db.query(PurchaseOrder).filter(
            PurchaseOrder.po_number == po_number,
            PurchaseOrder.pr_id == pr_id
        ).first()

    def add_po(self, db: Session, **fields) -> PurchaseOrder:
        po = PurchaseOrder(**fields)
        db.add(po)
        db.flush()
        return po

    def get_pr(self, db: Session, pr_id: int) -> Optional[PurchaseRequisition]:
        """PR with lines and catalog items loaded, for mutation"""
        return db.query(PurchaseRequisition).options(
            selectinload(PurchaseRequisition.items).joinedload(PRItem.master_item)
        ).filter(PurchaseRequisition.id == pr_id).first()

    def get_pr_by_id(self, db: Session, pr_id: int, include_purchase_orders: bool = False) -> Optional[PRDetailResponse]:
        """
        Get a PR with store/department/requester/approver names and its lines.

        Returns:
            PRDetailResponse, or None when the PR does not exist
        """
        pr = self._with_names(db.query(PurchaseRequisition)).filter(PurchaseRequisition.id == pr_id).first()
        if not pr:
            return None

        store = pr.store
        items = [
            PRItemResponse(
                id=item.id,
                pr_id=item.pr_id,
                master_item_id=item.master_item_id,
                sku=item.master_item.sku if item.master_item else None,
                item_name=item.master_item.name if item.master_item else None,
                description=item.master_item.description if item.master_item else None,
                unit=item.master_item.unit if item.master_item else None,
                quantity=item.quantity,
                estimated_unit_cost=item.estimated_unit_cost or 0,
                received_quantity=item.received_quantity or 0,
                status=item.status,
                notes=item.notes
            )
            for item in pr.items
        ]

        purchase_orders = []
        if include_purchase_orders:
            purchase_orders = [PurchaseOrderResponse.model_validate(po) for po in self.get_pos_by_pr(db, pr.id)]

        return PRDetailResponse(
            id=pr.id,
            pr_number=pr.pr_number,
            store_id=pr.store_id,
            store_name=store.name if store else None,
            department_name=store.department.name if store and store.department else None,
            requester_id=pr.requester_id,
            requester_name=pr.requester.full_name if pr.requester else None,
            status=pr.status,
            priority=pr.priority,
            required_date=pr.required_date,
            supplier_name=pr.supplier_name,
            supplier_contact=pr.supplier_contact,
            notes=pr.notes,
            approved_by=pr.approved_by,
            approver_name=pr.approver.full_name if pr.approver else None,
            approved_at=pr.approved_at,
            created_at=pr.created_at,
            updated_at=pr.updated_at,
            items=items,
            purchase_orders=purchase_orders
        )

    def get_prs_by_store(self, db: Session, store_id: int, status: Optional[str] = None) -> List[PRListResponse]:
        """List a store's PRs newest first, each with item_count and estimated_total"""
        query = db.query(PurchaseRequisition).options(
            joinedload(PurchaseRequisition.store),
            joinedload(PurchaseRequisition.requester),
            selectinload(PurchaseRequisition.items),
        ).filter(PurchaseRequisition.store_id == store_id)

        if status:
            query = query.filter(PurchaseRequisition.status == status)

        prs = query.order_by(PurchaseRequisition.created_at.desc(), PurchaseRequisition.id.desc()).all()

        return [
            PRListResponse(
                id=pr.id,
                pr_number=pr.pr_number,
                store_id=pr.store_id,
                store_name=pr.store.name if pr.store else None,
                requester_id=pr.requester_id,
                requester_name=pr.requester.full_name if pr.requester else None,
                status=pr.status,
                priority=pr.priority,
                required_date=pr.required_date,
                notes=pr.notes,
                created_at=pr.created_at,
                item_count=len(pr.items),
                estimated_total=_estimated_total(pr)
            )
            for pr in prs
        ]

    def get_pos_by_pr(self, db: Session, pr_id: int) -> List[PurchaseOrder]:
        return db.query(PurchaseOrder).filter(
            PurchaseOrder.pr_id == pr_id
        ).order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc()).all()

    def _dashboard_query(self, db: Session, store_id: Optional[int]):
        query = db.query(PurchaseRequisition).options(
            joinedload(PurchaseRequisition.store).joinedload(Store.department),
            joinedload(PurchaseRequisition.requester),
            selectinload(PurchaseRequisition.items),
        )
        if store_id:
            query = query.filter(PurchaseRequisition.store_id == store_id)
        return query

    def get_pending_approvals(
        self,
        db: Session,
        store_id: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[PendingApprovalEntry]:
        """PRs waiting for approval, oldest first"""
        today = today or date.today()
        prs = self._dashboard_query(db, store_id).filter(
            PurchaseRequisition.status == PRStatus.PENDING.value
        ).order_by(PurchaseRequisition.created_at.asc(), PurchaseRequisition.id.asc()).all()

        return [
            PendingApprovalEntry(
                id=pr.id,
                pr_number=pr.pr_number,
                store_id=pr.store_id,
                store_name=pr.store.name if pr.store else None,
                department_name=pr.store.department.name if pr.store and pr.store.department else None,
                requester_name=pr.requester.full_name if pr.requester else None,
                priority=pr.priority,
                required_date=pr.required_date,
                created_at=pr.created_at,
                total_amount=_estimated_total(pr),
                days_pending=_days_between(pr.created_at, today)
            )
            for pr in prs
        ]

    def _delivery_entry(self, pr: PurchaseRequisition, today: date, include_tomorrow: bool) -> DeliveryEntry:
        urgency = classify_urgency(pr.required_date, today, include_tomorrow)
        return DeliveryEntry(
            id=pr.id,
            pr_number=pr.pr_number,
            store_id=pr.store_id,
            store_name=pr.store.name if pr.store else None,
            department_name=pr.store.department.name if pr.store and pr.store.department else None,
            status=pr.status,
            priority=pr.priority,
            required_date=pr.required_date,
            total_amount=_estimated_total(pr),
            urgency=urgency,
            days_overdue=(today - pr.required_date).days if pr.required_date < today else None
        )

    def get_upcoming_deliveries(
        self,
        db: Session,
        store_id: Optional[int] = None,
        days: Optional[int] = None,
        today: Optional[date] = None,
        include_tomorrow: bool = False
    ) -> List[DeliveryEntry]:
        """
        Open PRs whose required date falls within the next ``days`` days
        (overdue ones included), earliest first.
        """
        today = today or date.today()
        days = settings.upcoming_delivery_days if days is None else days
        horizon = today + timedelta(days=days)

        prs = self._dashboard_query(db, store_id).filter(
            PurchaseRequisition.status.in_([s.value for s in OPEN_DELIVERY_STATUSES]),
            PurchaseRequisition.required_date.isnot(None),
            PurchaseRequisition.required_date <= horizon
        ).order_by(PurchaseRequisition.required_date.asc(), PurchaseRequisition.id.asc()).all()

        return [self._delivery_entry(pr, today, include_tomorrow) for pr in prs]

    def get_overdue_deliveries(
        self,
        db: Session,
        store_id: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[DeliveryEntry]:
        """Open PRs past their required date, most overdue first"""
        today = today or date.today()
        prs = self._dashboard_query(db, store_id).filter(
            PurchaseRequisition.status.in_([s.value for s in OPEN_DELIVERY_STATUSES]),
            PurchaseRequisition.required_date < today
        ).order_by(PurchaseRequisition.required_date.asc(), PurchaseRequisition.id.asc()).all()

        return [self._delivery_entry(pr, today, include_tomorrow=False) for pr in prs]
