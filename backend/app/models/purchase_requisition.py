from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class PurchaseRequisition(Base):
    """Internal request to buy items for a store. Never physically deleted."""
    __tablename__ = "purchase_requisitions"

    id = Column(Integer, primary_key=True, index=True)
    pr_number = Column(String, unique=True, nullable=False, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    status = Column(String, default="pending", index=True)  # pending, approved, rejected, ordered, partially_received, fully_received
    priority = Column(String, default="normal")  # low, normal, high, urgent
    required_date = Column(Date, nullable=True, index=True)
    supplier_name = Column(String, nullable=True)
    supplier_contact = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    store = relationship("Store")
    requester = relationship("User", foreign_keys=[requester_id])
    approver = relationship("User", foreign_keys=[approved_by])
    items = relationship("PRItem", back_populates="purchase_requisition", order_by="PRItem.id")
    purchase_orders = relationship("PurchaseOrder", back_populates="purchase_requisition")
