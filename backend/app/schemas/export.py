from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime


class ExportLine(BaseModel):
    no: int
    sku: Optional[str]
    item_name: Optional[str]
    description: str = ""
    unit: Optional[str]
    quantity_requested: int
    estimated_price: float
    estimated_total: float
    received_quantity: int
    pending_quantity: int
    notes: str = ""


class ExportPurchaseOrder(BaseModel):
    po_number: str
    supplier_name: Optional[str]
    order_date: Optional[date]
    received_date: Optional[date]


class PurchasingSection(BaseModel):
    """Blank block filled in by purchasing and keyed back in at receiving"""
    po_number: str = ""
    supplier_name: str = ""
    supplier_contact: str = ""
    order_date: str = ""
    actual_delivery_date: str = ""
    actual_prices: List[float] = []


class PurchasingDocument(BaseModel):
    document_type: str = "PURCHASE_REQUISITION"
    pr_number: str
    status: str
    pr_date: Optional[datetime]
    required_date: Optional[date]
    priority: str
    requester: Optional[str]
    approver: Optional[str]
    approved_at: Optional[datetime]
    department: Optional[str]
    store: Optional[str]
    notes: Optional[str]

    items: List[ExportLine] = []

    # Summary
    total_items: int
    total_quantity: int
    total_estimated_amount: float

    purchase_orders: List[ExportPurchaseOrder] = []
    purchasing_section: Optional[PurchasingSection] = None
