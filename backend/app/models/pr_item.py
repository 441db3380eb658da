from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class PRItem(Base):
    __tablename__ = "pr_items"

    id = Column(Integer, primary_key=True, index=True)
    pr_id = Column(Integer, ForeignKey("purchase_requisitions.id"), nullable=False, index=True)
    master_item_id = Column(Integer, ForeignKey("master_items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    estimated_unit_cost = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    status = Column(String, default="pending")  # pending, partially_received, received
    received_quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    purchase_requisition = relationship("PurchaseRequisition", back_populates="items")
    master_item = relationship("MasterItem")
