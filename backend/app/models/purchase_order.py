from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class PurchaseOrder(Base):
    """Supplier PO recorded at receiving time, keyed by (po_number, pr_id)"""
    __tablename__ = "purchase_orders"
    __table_args__ = (UniqueConstraint("po_number", "pr_id", name="uq_purchase_orders_po_number_pr"),)

    id = Column(Integer, primary_key=True, index=True)
    po_number = Column(String, nullable=False, index=True)
    pr_id = Column(Integer, ForeignKey("purchase_requisitions.id"), nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False)
    supplier_name = Column(String, nullable=True)
    supplier_contact = Column(String, nullable=True)
    status = Column(String, default="ordered")  # ordered, received
    order_date = Column(Date, nullable=True)
    expected_delivery_date = Column(Date, nullable=True)
    actual_delivery_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    purchase_requisition = relationship("PurchaseRequisition", back_populates="purchase_orders")
    lots = relationship("InventoryLot", back_populates="purchase_order")
