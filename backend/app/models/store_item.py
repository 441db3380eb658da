from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class StoreItem(Base):
    """Quantity on hand of one master item at one store"""
    __tablename__ = "store_items"
    __table_args__ = (UniqueConstraint("store_id", "master_item_id", name="uq_store_items_store_master_item"),)

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    master_item_id = Column(Integer, ForeignKey("master_items.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, default=0)
    safety_stock = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    store = relationship("Store", back_populates="store_items")
    master_item = relationship("MasterItem")
    lots = relationship("InventoryLot", back_populates="store_item")
