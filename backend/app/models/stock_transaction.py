from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base


class StockTransaction(Base):
    """Append-only stock movement record"""
    __tablename__ = "stock_transactions"

    id = Column(Integer, primary_key=True, index=True)
    store_id = Column(Integer, ForeignKey("stores.id"), nullable=False, index=True)
    store_item_id = Column(Integer, ForeignKey("store_items.id"), nullable=False, index=True)
    lot_id = Column(Integer, ForeignKey("inventory_lots.id"), nullable=True)
    transaction_type = Column(String, nullable=False, index=True)  # receive, pick, adjust, transfer_in, transfer_out
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    reference_type = Column(String, nullable=True)  # pr, po
    reference_id = Column(Integer, nullable=True)
    reference_number = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    store_item = relationship("StoreItem")
    lot = relationship("InventoryLot")
