"""
Purchase Requisitions Router - create, approve, receive and export PRs
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import NotFoundError, ValidationError
from app.schemas.export import PurchasingDocument
from app.schemas.pr import (
    PRCreate,
    PRCreateResult,
    PRDetailResponse,
    PRListResponse,
    PurchaseOrderResponse,
    ApproveRequest,
    RejectRequest,
    ReceiveGoodsRequest,
    ReceiveResult,
)
from app.services.pr_workflow_service import PRWorkflowService, pr_workflow_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prs", tags=["purchase-requisitions"])


def get_workflow_service() -> PRWorkflowService:
    return pr_workflow_service


@router.get("", response_model=List[PRListResponse])
def list_prs(
    store_id: int = Query(..., description="Store to list PRs for"),
    status: Optional[str] = Query(None, description="Filter by status"),
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """List a store's PRs, newest first"""
    return service.get_prs_by_store(store_id, db, status=status)


@router.post("", response_model=PRCreateResult)
def create_pr(
    pr_data: PRCreate,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """Create a PR with its items"""
    return service.create_pr(pr_data, db)


@router.get("/{pr_id}", response_model=PRDetailResponse)
def get_pr(
    pr_id: int,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """Get PR details with items and purchase orders"""
    try:
        return service.get_pr_by_id(pr_id, db)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{pr_id}/purchase-orders", response_model=List[PurchaseOrderResponse])
def list_pr_purchase_orders(
    pr_id: int,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """Purchase orders recorded against a PR"""
    try:
        return service.get_pos_by_pr(pr_id, db)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{pr_id}/approve")
def approve_pr(
    pr_id: int,
    request: ApproveRequest,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    try:
        success = service.approve_pr(pr_id, request.approver_id, db, notes=request.notes)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": success}


@router.post("/{pr_id}/reject")
def reject_pr(
    pr_id: int,
    request: RejectRequest,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    try:
        success = service.reject_pr(pr_id, request.approver_id, request.reason, db)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": success}


@router.post("/{pr_id}/receive", response_model=ReceiveResult)
def receive_goods(
    pr_id: int,
    request: ReceiveGoodsRequest,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """
    Receive goods against a PR.

    In the purchase-order workflow the body must carry the PO number and
    supplier name purchasing obtained.
    """
    try:
        return service.receive_goods(pr_id, request, db)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        logger.warning(f"Rejected receive for PR {pr_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{pr_id}/export", response_model=PurchasingDocument)
def export_pr(
    pr_id: int,
    db: Session = Depends(get_db),
    service: PRWorkflowService = Depends(get_workflow_service)
):
    """Purchasing document for the PR"""
    try:
        return service.export_for_purchasing(pr_id, db)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
