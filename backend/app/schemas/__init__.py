from app.schemas.pr import PRCreate, PRDetailResponse, PRListResponse, ReceiveGoodsRequest, ReceiveResult
from app.schemas.export import PurchasingDocument
from app.schemas.notification import NotificationResponse

__all__ = [
    "PRCreate",
    "PRDetailResponse",
    "PRListResponse",
    "ReceiveGoodsRequest",
    "ReceiveResult",
    "PurchasingDocument",
    "NotificationResponse",
]
