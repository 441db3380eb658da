from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.routers.purchase_requisitions import get_workflow_service
from app.schemas.pr import DashboardSummary, DeliveryEntry, PendingApprovalEntry
from app.services.pr_workflow_service import PRWorkflowService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(
    store_id: Optional[int] = Query(None, description="Limit to one store"),
    days: Optional[int] = Query(None, ge=0, description="Upcoming window in days"),
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """Upcoming and overdue deliveries plus PRs waiting for approval"""
    return service.get_dashboard_summary(store_id, db, days=days)


@router.get("/pending-approvals", response_model=List[PendingApprovalEntry])
def pending_approvals(
    store_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    return service.get_pending_approvals(store_id, db)


@router.get("/upcoming-deliveries", response_model=List[DeliveryEntry])
def upcoming_deliveries(
    store_id: Optional[int] = Query(None),
    days: Optional[int] = Query(None, ge=0),
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    return service.get_upcoming_deliveries(store_id, db, days=days)


@router.get("/overdue-deliveries", response_model=List[DeliveryEntry])
def overdue_deliveries(
    store_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    return service.get_overdue_deliveries(store_id, db)
