from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.schemas.notification import NotificationResponse, UnreadCountResponse
from app.services.notification_service import notification_service

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    user_id: int = Query(..., description="Notification owner"),
    unread_only: bool = Query(False),
    type: Optional[str] = Query(None, description="Filter by notification type"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """List a user's notifications, newest first"""
    return notification_service.get_user_notifications(
        db, user_id, unread_only=unread_only, type=type, limit=limit
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
def unread_count(user_id: int = Query(...), db: Session = Depends(get_db)):
    return UnreadCountResponse(count=notification_service.get_unread_count(db, user_id))


@router.post("/read-all")
def mark_all_read(user_id: int = Query(...), db: Session = Depends(get_db)):
    updated = notification_service.mark_all_as_read(db, user_id)
    return {"success": True, "updated": updated}


@router.post("/{notification_id}/read")
def mark_read(notification_id: int, user_id: int = Query(...), db: Session = Depends(get_db)):
    if not notification_service.mark_as_read(db, notification_id, user_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"success": True}
