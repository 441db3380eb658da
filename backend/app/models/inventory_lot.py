from sqlalchemy import Column, Integer, String, Text, Numeric, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class InventoryLot(Base):
    """Immutable receipt batch carrying its own cost basis"""
    __tablename__ = "inventory_lots"

    id = Column(Integer, primary_key=True, index=True)
    store_item_id = Column(Integer, ForeignKey("store_items.id"), nullable=False, index=True)
    lot_number = Column(String, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    total_cost = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    remaining_quantity = Column(Integer, nullable=False)
    received_date = Column(Date, nullable=False)
    expiry_date = Column(Date, nullable=True)
    pr_id = Column(Integer, ForeignKey("purchase_requisitions.id"), nullable=True, index=True)
    po_id = Column(Integer, ForeignKey("purchase_orders.id"), nullable=True, index=True)
    supplier_name = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String, default="active")  # active, depleted, expired
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    store_item = relationship("StoreItem", back_populates="lots")
    purchase_order = relationship("PurchaseOrder", back_populates="lots")
