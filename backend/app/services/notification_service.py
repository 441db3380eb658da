"""
Notification Service - stores in-app notifications for users.

Also acts as the PR workflow's notifier: the workflow calls
``pending_approval`` / ``pr_approved`` / ``pr_rejected`` / ``pr_received``
after each committed transition. Delivery to browsers (SSE, push) is handled
outside this service by reading the notifications table.
"""
import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session

from app.config import settings
from app.database import transaction
from app.models.notification import Notification
from app.models.purchase_requisition import PurchaseRequisition
from app.models.user import User

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    PR_APPROVED = "pr_approved"
    PR_REJECTED = "pr_rejected"
    PR_RECEIVED = "pr_received"
    LOW_STOCK = "low_stock"
    DELIVERY_TODAY = "delivery_today"
    DELIVERY_OVERDUE = "delivery_overdue"
    PENDING_APPROVAL = "pending_approval"
    SYSTEM = "system"


def _pr_link(pr_id: int, suffix: str = "") -> str:
    return f"/prs/{pr_id}{suffix}"


class NotificationService:
    """Service for creating and reading user notifications"""

    def _add(
        self,
        db: Session,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]],
        link: Optional[str]
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=NotificationType(type).value,
            title=title,
            message=message,
            data=data or {},
            link=link,
            is_read=False
        )
        db.add(notification)
        return notification

    def create_notification(
        self,
        db: Session,
        user_id: int,
        type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        link: Optional[str] = None
    ) -> Notification:
        with transaction(db):
            notification = self._add(db, user_id, type, title, message, data, link)
        db.refresh(notification)
        logger.info(f"Created {notification.type} notification {notification.id} for user {user_id}")
        return notification

    def _create_for_users(self, db: Session, users: Iterable[User], **fields) -> List[Notification]:
        with transaction(db):
            notifications = [self._add(db, user_id=user.id, **fields) for user in users]
        logger.info(f"Created {len(notifications)} {fields['type']} notifications")
        return notifications

    def _active_users(self, db: Session):
        return db.query(User).filter(User.is_active.is_(True))

    def create_notification_for_store(
        self,
        db: Session,
        store_id: int,
        type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        link: Optional[str] = None
    ) -> List[Notification]:
        """Notify every active user assigned to a store"""
        users = self._active_users(db).filter(User.store_id == store_id).order_by(User.id).all()
        return self._create_for_users(db, users, type=type, title=title, message=message, data=data, link=link)

    def create_notification_for_role(
        self,
        db: Session,
        role: str,
        type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
        link: Optional[str] = None
    ) -> List[Notification]:
        """Notify every active user with a role"""
        users = self._active_users(db).filter(User.role == role).order_by(User.id).all()
        return self._create_for_users(db, users, type=type, title=title, message=message, data=data, link=link)

    def pending_approval(self, db: Session, pr: PurchaseRequisition) -> List[Notification]:
        """Ask the store's managers and admins to approve a new PR"""
        managers = self._active_users(db).filter(
            User.store_id == pr.store_id,
            User.role.in_(["manager", "admin"])
        ).order_by(User.id).all()

        requester = db.get(User, pr.requester_id)
        requester_name = requester.full_name if requester else f"User {pr.requester_id}"
        store_name = pr.store.name if pr.store else f"store {pr.store_id}"

        return self._create_for_users(
            db,
            managers,
            type=NotificationType.PENDING_APPROVAL,
            title="PR awaiting approval",
            message=f"{requester_name} requests approval of PR {pr.pr_number} from {store_name}",
            data={"pr_id": pr.id, "pr_number": pr.pr_number},
            link=_pr_link(pr.id, "/approve")
        )

    def pr_approved(self, db: Session, pr: PurchaseRequisition, approver_name: str) -> Notification:
        return self.create_notification(
            db,
            user_id=pr.requester_id,
            type=NotificationType.PR_APPROVED,
            title="PR approved",
            message=f"PR {pr.pr_number} was approved by {approver_name}",
            data={"pr_id": pr.id, "pr_number": pr.pr_number},
            link=_pr_link(pr.id)
        )

    def pr_rejected(self, db: Session, pr: PurchaseRequisition, rejector_name: str, reason: str) -> Notification:
        return self.create_notification(
            db,
            user_id=pr.requester_id,
            type=NotificationType.PR_REJECTED,
            title="PR rejected",
            message=f"PR {pr.pr_number} was rejected by {rejector_name}: {reason}",
            data={"pr_id": pr.id, "pr_number": pr.pr_number, "reason": reason},
            link=_pr_link(pr.id)
        )

    def pr_received(self, db: Session, pr: PurchaseRequisition, status: str, po_number: Optional[str]) -> Notification:
        source = f"PO {po_number}" if po_number else "supplier"
        return self.create_notification(
            db,
            user_id=pr.requester_id,
            type=NotificationType.PR_RECEIVED,
            title="Goods received",
            message=f"PR {pr.pr_number} received goods from {source} ({status})",
            data={"pr_id": pr.id, "pr_number": pr.pr_number, "po_number": po_number, "status": status},
            link=_pr_link(pr.id)
        )

    def delivery_today(self, db: Session, pr: PurchaseRequisition) -> List[Notification]:
        return self.create_notification_for_store(
            db,
            pr.store_id,
            type=NotificationType.DELIVERY_TODAY,
            title="Delivery due today",
            message=f"PR {pr.pr_number} is due to be received today",
            data={"pr_id": pr.id, "pr_number": pr.pr_number},
            link=_pr_link(pr.id)
        )

    def delivery_overdue(self, db: Session, pr: PurchaseRequisition, days_overdue: int) -> List[Notification]:
        return self.create_notification_for_store(
            db,
            pr.store_id,
            type=NotificationType.DELIVERY_OVERDUE,
            title="Delivery overdue",
            message=f"PR {pr.pr_number} is {days_overdue} day(s) overdue",
            data={"pr_id": pr.id, "pr_number": pr.pr_number, "days_overdue": days_overdue},
            link=_pr_link(pr.id)
        )

    def get_user_notifications(
        self,
        db: Session,
        user_id: int,
        unread_only: bool = False,
        type: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Notification]:
        query = db.query(Notification).filter(Notification.user_id == user_id)

        if unread_only:
            query = query.filter(Notification.is_read.is_(False))
        if type:
            query = query.filter(Notification.type == type)

        query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_unread_count(self, db: Session, user_id: int) -> int:
        return db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False)
        ).count()

    def mark_as_read(self, db: Session, notification_id: int, user_id: int) -> bool:
        """Mark one of the user's notifications read. Returns False if it is not theirs."""
        with transaction(db):
            updated = db.query(Notification).filter(
                Notification.id == notification_id,
                Notification.user_id == user_id
            ).update({"is_read": True, "read_at": datetime.now(timezone.utc)}, synchronize_session=False)
        return updated > 0

    def mark_all_as_read(self, db: Session, user_id: int) -> int:
        with transaction(db):
            updated = db.query(Notification).filter(
                Notification.user_id == user_id,
                Notification.is_read.is_(False)
            ).update({"is_read": True, "read_at": datetime.now(timezone.utc)}, synchronize_session=False)
        return updated

    def delete_old_notifications(self, db: Session, days: Optional[int] = None) -> int:
        days = settings.notification_retention_days if days is None else days
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        with transaction(db):
            deleted = db.query(Notification).filter(
                Notification.created_at < cutoff
            ).delete(synchronize_session=False)
        logger.info(f"Deleted {deleted} notifications older than {days} days")
        return deleted


# Singleton instance
notification_service = NotificationService()
