"""
PR Workflow Service - purchase requisition lifecycle and goods receipt.

Workflow:
1. Create PR (internal request, no supplier yet)
2. Approve / reject
3. Export the PR for purchasing; purchasing buys outside the system and gets a PO number
4. Receive goods against the PR with the PO number, supplier and actual prices

One service covers both receiving variants. With ``requires_purchase_order``
every receipt must carry a PO number and supplier name and is recorded on a
purchase_orders row; without it goods are received straight against the PR.
With ``requires_approval=False`` PRs start as ``ordered`` and skip approval.
"""
import logging
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Protocol, Tuple
from sqlalchemy.orm import Session

from app.config import settings
from app.database import transaction
from app.exceptions import NotFoundError, ValidationError
from app.models.pr_item import PRItem
from app.models.purchase_order import PurchaseOrder
from app.models.purchase_requisition import PurchaseRequisition
from app.models.user import User
from app.schemas.export import PurchasingDocument
from app.schemas.pr import (
    PRCreate,
    PRCreateResult,
    PRDetailResponse,
    PRListResponse,
    PurchaseOrderResponse,
    ReceiveGoodsRequest,
    ReceiveItem,
    ReceiveRecord,
    ReceiveResult,
    PendingApprovalEntry,
    DeliveryEntry,
    DashboardSummary,
)
from app.services.export_service import build_purchasing_document
from app.services.notification_service import notification_service
from app.services.pr_repository import PRRepository
from app.services.stock_ledger import StockLedger
from app.utils.id_generator import DatedNumberGenerator, IdGenerator
from app.utils.pr_rules import PRPriority, PRStatus, derive_line_status, derive_status, receivable_statuses

logger = logging.getLogger(__name__)


class WorkflowNotifier(Protocol):
    def pending_approval(self, db: Session, pr: PurchaseRequisition): ...

    def pr_approved(self, db: Session, pr: PurchaseRequisition, approver_name: str): ...

    def pr_rejected(self, db: Session, pr: PurchaseRequisition, rejector_name: str, reason: str): ...

    def pr_received(self, db: Session, pr: PurchaseRequisition, status: str, po_number: Optional[str]): ...


# (line, quantity to receive, unit cost)
MatchedLine = Tuple[PRItem, int, float]


class PRWorkflowService:
    """Service for moving PRs through approval and receiving"""

    def __init__(
        self,
        requires_purchase_order: bool = True,
        requires_approval: bool = True,
        pr_numbers: Optional[IdGenerator] = None,
        ledger: Optional[StockLedger] = None,
        repository: Optional[PRRepository] = None,
        notifier: Optional[WorkflowNotifier] = None,
        reject_unknown_lines: bool = False
    ):
        self.requires_purchase_order = requires_purchase_order
        self.requires_approval = requires_approval
        self.pr_numbers = pr_numbers or DatedNumberGenerator(settings.pr_number_prefix)
        self.ledger = ledger or StockLedger()
        self.repository = repository or PRRepository()
        self.notifier = notifier
        self.reject_unknown_lines = reject_unknown_lines

    @property
    def initial_status(self) -> PRStatus:
        return PRStatus.PENDING if self.requires_approval else PRStatus.ORDERED

    @property
    def base_status(self) -> PRStatus:
        """Status a receivable PR has before anything arrives"""
        return PRStatus.APPROVED if self.requires_approval else PRStatus.ORDERED

    def _require_pr(self, db: Session, pr_id: int) -> PurchaseRequisition:
        pr = self.repository.get_pr(db, pr_id)
        if not pr:
            raise NotFoundError("PR", pr_id)
        return pr

    def _user_name(self, db: Session, user_id: Optional[int]) -> str:
        user = db.get(User, user_id) if user_id is not None else None
        return user.full_name if user else f"User {user_id}"

    def _notify(self, event: str, db: Session, *args) -> None:
        """
        Send a workflow notification after the change has committed.

        A failing notifier is logged and does not fail the call; the
        committed change stands either way.
        """
        if not self.notifier:
            return
        try:
            getattr(self.notifier, event)(db, *args)
        except Exception as e:
            logger.error(f"Error sending {event} notification: {e}", exc_info=True)
            db.rollback()

    def create_pr(self, data: PRCreate, db: Session) -> PRCreateResult:
        """
        Create a PR with its lines.

        The PR number comes from the injected generator; a duplicate number
        fails with the database's IntegrityError and nothing is written.
        """
        pr_number = self.pr_numbers.next()

        with transaction(db):
            pr = self.repository.create_pr(
                db,
                pr_number=pr_number,
                status=self.initial_status,
                store_id=data.store_id,
                requester_id=data.requester_id,
                priority=PRPriority(data.priority).value,
                required_date=data.required_date,
                notes=data.notes,
                lines=data.items
            )
            pr_id = pr.id

        logger.info(f"Created PR {pr_number} for store {data.store_id} with {len(data.items)} item(s)")

        if self.requires_approval:
            self._notify("pending_approval", db, pr)

        return PRCreateResult(id=pr_id, pr_number=pr_number)

    def approve_pr(self, pr_id: int, approver_id: int, db: Session, notes: Optional[str] = None) -> bool:
        """
        Approve a PR.

        The current status is not checked, so an approved or rejected PR can
        be approved again. ``notes`` replaces the PR notes only when given.
        """
        with transaction(db):
            pr = self._require_pr(db, pr_id)
            pr.status = PRStatus.APPROVED.value
            pr.approved_by = approver_id
            pr.approved_at = datetime.now(timezone.utc)
            if notes is not None:
                pr.notes = notes

        logger.info(f"Approved PR {pr_id} by user {approver_id}")

        if self.notifier:
            self._notify("pr_approved", db, pr, self._user_name(db, approver_id))
        return True

    def reject_pr(self, pr_id: int, approver_id: int, reason: str, db: Session) -> bool:
        """Reject a PR. The reason is required and always replaces the notes."""
        if not reason or not reason.strip():
            raise ValidationError("A reason is required to reject a PR")

        with transaction(db):
            pr = self._require_pr(db, pr_id)
            pr.status = PRStatus.REJECTED.value
            pr.approved_by = approver_id
            pr.approved_at = datetime.now(timezone.utc)
            pr.notes = reason

        logger.info(f"Rejected PR {pr_id} by user {approver_id}")

        if self.notifier:
            self._notify("pr_rejected", db, pr, self._user_name(db, approver_id), reason)
        return True

    def _match_lines(self, pr: PurchaseRequisition, lines: List[ReceiveItem]) -> List[MatchedLine]:
        """
        Pair payload lines with PR lines and validate them all up front.

        Lines whose pr_item_id is not on the PR are skipped unless
        ``reject_unknown_lines`` is set.

        Raises:
            ValidationError: bad quantity or cost, or a line would be over-received
        """
        items_by_id: Dict[int, PRItem] = {item.id: item for item in pr.items}
        in_this_call: Dict[int, int] = {}
        matched: List[MatchedLine] = []

        for line in lines:
            pr_item = items_by_id.get(line.pr_item_id)
            if pr_item is None:
                if self.reject_unknown_lines:
                    raise ValidationError(f"Item {line.pr_item_id} is not on PR {pr.pr_number}")
                logger.debug(f"Skipping unknown item {line.pr_item_id} on PR {pr.pr_number}")
                continue

            quantity = line.amount
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValidationError(f"Received quantity for item {pr_item.id} must be a positive integer")

            unit_cost = line.unit_cost if line.unit_cost is not None else (pr_item.estimated_unit_cost or 0)
            if unit_cost < 0:
                raise ValidationError(f"Unit cost for item {pr_item.id} must not be negative")

            already = (pr_item.received_quantity or 0) + in_this_call.get(pr_item.id, 0)
            if already + quantity > pr_item.quantity:
                raise ValidationError(
                    f"Receiving {quantity} of item {pr_item.id} exceeds the requested {pr_item.quantity} "
                    f"({already} already received)"
                )

            in_this_call[pr_item.id] = in_this_call.get(pr_item.id, 0) + quantity
            matched.append((pr_item, quantity, float(unit_cost)))

        return matched

    def _record_purchase_order(
        self,
        db: Session,
        pr: PurchaseRequisition,
        po_number: str,
        supplier_name: str,
        data: ReceiveGoodsRequest
    ) -> PurchaseOrder:
        """Create the PO on its first receipt, otherwise mark the existing one received again"""
        po = self.repository.find_po(db, pr.id, po_number)
        if po is None:
            po = self.repository.add_po(
                db,
                po_number=po_number,
                pr_id=pr.id,
                store_id=pr.store_id,
                supplier_name=supplier_name,
                supplier_contact=data.supplier_contact,
                order_date=data.received_date,
                actual_delivery_date=data.received_date,
                notes=data.notes,
                created_by=data.user_id,
                status="received"
            )
            logger.info(f"Recorded PO {po_number} for PR {pr.pr_number}")
        else:
            po.status = "received"
            po.actual_delivery_date = data.received_date
            po.updated_at = datetime.now(timezone.utc)
        return po

    def receive_goods(self, pr_id: int, data: ReceiveGoodsRequest, db: Session) -> ReceiveResult:
        """
        Receive goods against a PR.

        Args:
            pr_id: PR ID
            data: PO number, supplier, received date, invoice number and lines
            db: Database session

        Returns:
            ReceiveResult with the recomputed PR status and one record per received line

        Raises:
            ValidationError: missing PO number/supplier (PO variant), PR not
                receivable, or a bad line. Raised before anything is written.
            NotFoundError: the PR does not exist
        """
        po_number = (data.po_number or "").strip()
        supplier_name = (data.supplier_name or "").strip()

        if self.requires_purchase_order:
            if not po_number:
                raise ValidationError("PO number is required")
            if not supplier_name:
                raise ValidationError("Supplier name is required")

        pr = self._require_pr(db, pr_id)
        receivable = {status.value for status in receivable_statuses(self.requires_approval)}
        if pr.status not in receivable:
            raise ValidationError("PR must be approved before receiving")

        matched = self._match_lines(pr, data.items)
        supplier_name = supplier_name or pr.supplier_name
        records: List[ReceiveRecord] = []

        with transaction(db):
            po = None
            if self.requires_purchase_order:
                po = self._record_purchase_order(db, pr, po_number, supplier_name, data)

            for pr_item, quantity, unit_cost in matched:
                receipt = self.ledger.receive_line(
                    db,
                    store_id=pr.store_id,
                    master_item_id=pr_item.master_item_id,
                    quantity=quantity,
                    unit_cost=unit_cost,
                    received_date=data.received_date,
                    pr_id=pr.id,
                    po_id=po.id if po else None,
                    supplier_name=supplier_name,
                    invoice_number=data.invoice_number,
                    notes=data.notes,
                    user_id=data.user_id,
                    reference_number=po_number if po else pr.pr_number
                )
                pr_item.received_quantity = (pr_item.received_quantity or 0) + quantity
                pr_item.status = derive_line_status(pr_item).value

                records.append(ReceiveRecord(
                    pr_item_id=pr_item.id,
                    item_name=pr_item.master_item.name if pr_item.master_item else None,
                    quantity=quantity,
                    unit_cost=unit_cost,
                    lot_number=receipt.lot_number
                ))

            status = derive_status(pr.items, self.base_status)
            pr.status = status.value
            pr_number = pr.pr_number

        logger.info(f"Received goods for PR {pr_number} with PO {po_number or '-'}, status: {status.value}")

        self._notify("pr_received", db, pr, status.value, po_number or None)

        return ReceiveResult(
            status=status,
            po_number=po_number or None,
            supplier_name=supplier_name,
            receive_records=records
        )

    def receive_from_pr(self, pr_id: int, data: ReceiveGoodsRequest, db: Session) -> ReceiveResult:
        return self.receive_goods(pr_id, data, db)

    def get_pr_by_id(self, pr_id: int, db: Session) -> PRDetailResponse:
        pr = self.repository.get_pr_by_id(db, pr_id, include_purchase_orders=True)
        if not pr:
            raise NotFoundError("PR", pr_id)
        return pr

    def get_prs_by_store(self, store_id: int, db: Session, status: Optional[str] = None) -> List[PRListResponse]:
        return self.repository.get_prs_by_store(db, store_id, status=status)

    def get_pos_by_pr(self, pr_id: int, db: Session) -> List[PurchaseOrderResponse]:
        self._require_pr(db, pr_id)
        return [PurchaseOrderResponse.model_validate(po) for po in self.repository.get_pos_by_pr(db, pr_id)]

    def export_for_purchasing(self, pr_id: int, db: Session) -> PurchasingDocument:
        """Purchasing document for a PR; read-only"""
        pr = self.repository.get_pr_by_id(db, pr_id)
        if not pr:
            raise NotFoundError("PR", pr_id)
        return build_purchasing_document(
            pr,
            purchase_orders=self.repository.get_pos_by_pr(db, pr_id),
            include_purchasing_section=self.requires_purchase_order
        )

    def export_to_excel(self, pr_id: int, db: Session) -> PurchasingDocument:
        return self.export_for_purchasing(pr_id, db)

    def get_pending_approvals(self, store_id: Optional[int], db: Session, today: Optional[date] = None) -> List[PendingApprovalEntry]:
        return self.repository.get_pending_approvals(db, store_id=store_id, today=today)

    def get_upcoming_deliveries(
        self,
        store_id: Optional[int],
        db: Session,
        days: Optional[int] = None,
        today: Optional[date] = None
    ) -> List[DeliveryEntry]:
        return self.repository.get_upcoming_deliveries(
            db,
            store_id=store_id,
            days=days,
            today=today,
            include_tomorrow=not self.requires_approval
        )

    def get_overdue_deliveries(self, store_id: Optional[int], db: Session, today: Optional[date] = None) -> List[DeliveryEntry]:
        return self.repository.get_overdue_deliveries(db, store_id=store_id, today=today)

    def get_dashboard_summary(
        self,
        store_id: Optional[int],
        db: Session,
        days: Optional[int] = None,
        today: Optional[date] = None
    ) -> DashboardSummary:
        upcoming = self.get_upcoming_deliveries(store_id, db, days=days, today=today)
        overdue = self.get_overdue_deliveries(store_id, db, today=today)
        pending = self.get_pending_approvals(store_id, db, today=today)
        return DashboardSummary(
            upcoming=upcoming,
            overdue=overdue,
            pending_approvals=pending,
            upcoming_count=len(upcoming),
            overdue_count=len(overdue),
            pending_approval_count=len(pending)
        )


def build_workflow_service(notifier: Optional[WorkflowNotifier] = notification_service) -> PRWorkflowService:
    """Workflow service configured from settings"""
    return PRWorkflowService(
        requires_purchase_order=settings.workflow_requires_purchase_order,
        requires_approval=settings.workflow_requires_approval,
        notifier=notifier,
        reject_unknown_lines=settings.receive_reject_unknown_lines
    )


# Singleton instance
pr_workflow_service = build_workflow_service()
