from pydantic import BaseModel, Field, StrictInt, model_validator
from typing import List, Optional
from datetime import date, datetime
from app.utils.pr_rules import PRPriority, PRStatus, Urgency


class PRItemCreate(BaseModel):
    master_item_id: int
    quantity: StrictInt = Field(..., gt=0)
    estimated_unit_cost: Optional[float] = Field(0, ge=0)
    notes: Optional[str] = None


class PRCreate(BaseModel):
    store_id: int
    requester_id: int
    priority: PRPriority = PRPriority.NORMAL
    required_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[PRItemCreate] = Field(..., min_length=1)


class PRCreateResult(BaseModel):
    id: int
    pr_number: str


class ApproveRequest(BaseModel):
    approver_id: int
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    approver_id: int
    reason: str = Field(..., min_length=1)


class PRItemResponse(BaseModel):
    id: int
    pr_id: int
    master_item_id: int
    sku: Optional[str] = None
    item_name: Optional[str] = None
    description: Optional[str] = None
    unit: Optional[str] = None
    quantity: int
    estimated_unit_cost: float = 0
    received_quantity: int = 0
    status: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseOrderResponse(BaseModel):
    id: int
    po_number: str
    pr_id: int
    store_id: int
    supplier_name: Optional[str]
    supplier_contact: Optional[str]
    status: str
    order_date: Optional[date]
    expected_delivery_date: Optional[date]
    actual_delivery_date: Optional[date]
    notes: Optional[str]
    created_by: Optional[int]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class PRDetailResponse(BaseModel):
    id: int
    pr_number: str
    store_id: int
    store_name: Optional[str] = None
    department_name: Optional[str] = None
    requester_id: int
    requester_name: Optional[str] = None
    status: str
    priority: str
    required_date: Optional[date]
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    notes: Optional[str]
    approved_by: Optional[int] = None
    approver_name: Optional[str] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    items: List[PRItemResponse] = []
    purchase_orders: List[PurchaseOrderResponse] = []

    class Config:
        from_attributes = True


class PRListResponse(BaseModel):
    id: int
    pr_number: str
    store_id: int
    store_name: Optional[str] = None
    requester_id: int
    requester_name: Optional[str] = None
    status: str
    priority: str
    required_date: Optional[date]
    notes: Optional[str]
    created_at: Optional[datetime]
    item_count: int = 0
    estimated_total: float = 0

    class Config:
        from_attributes = True


class ReceiveItem(BaseModel):
    pr_item_id: int
    # Either name is accepted for the received amount
    quantity: Optional[StrictInt] = None
    received_quantity: Optional[StrictInt] = None
    unit_cost: Optional[float] = None

    @model_validator(mode="after")
    def check_quantity(self):
        if self.quantity is None and self.received_quantity is None:
            raise ValueError("quantity or received_quantity is required")
        return self

    @property
    def amount(self) -> int:
        return self.quantity if self.quantity is not None else self.received_quantity


class ReceiveGoodsRequest(BaseModel):
    po_number: Optional[str] = None
    supplier_name: Optional[str] = None
    supplier_contact: Optional[str] = None
    received_date: date = Field(default_factory=date.today)
    invoice_number: Optional[str] = None
    items: List[ReceiveItem] = []
    user_id: Optional[int] = None
    notes: Optional[str] = None


class ReceiveRecord(BaseModel):
    pr_item_id: int
    item_name: Optional[str]
    quantity: int
    unit_cost: float
    lot_number: str


class ReceiveResult(BaseModel):
    status: PRStatus
    po_number: Optional[str] = None
    supplier_name: Optional[str] = None
    receive_records: List[ReceiveRecord] = Field(default_factory=list, alias="receiveRecords")

    class Config:
        populate_by_name = True


class PendingApprovalEntry(BaseModel):
    id: int
    pr_number: str
    store_id: int
    store_name: Optional[str] = None
    department_name: Optional[str] = None
    requester_name: Optional[str] = None
    priority: str
    required_date: Optional[date]
    created_at: Optional[datetime]
    total_amount: float = 0
    days_pending: Optional[int] = None


class DeliveryEntry(BaseModel):
    id: int
    pr_number: str
    store_id: int
    store_name: Optional[str] = None
    department_name: Optional[str] = None
    status: str
    priority: str
    required_date: date
    total_amount: float = 0
    urgency: Urgency
    days_overdue: Optional[int] = None


class DashboardSummary(BaseModel):
    upcoming: List[DeliveryEntry] = []
    overdue: List[DeliveryEntry] = []
    pending_approvals: List[PendingApprovalEntry] = []
    upcoming_count: int = 0
    overdue_count: int = 0
    pending_approval_count: int = 0
