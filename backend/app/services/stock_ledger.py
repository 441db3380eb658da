"""
Stock Ledger - applies goods receipts to store stock.

Each receipt creates an inventory lot, adds to the store item's quantity and
appends a stock transaction. Writes are flushed but not committed; callers
wrap them in ``app.database.transaction`` so a receipt is all-or-nothing.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ValidationError
from app.models.inventory_lot import InventoryLot
from app.models.stock_transaction import StockTransaction
from app.models.store_item import StoreItem
from app.utils.id_generator import DatedNumberGenerator, IdGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LotReceipt:
    lot_id: int
    lot_number: str
    store_item_id: int


def _check_quantity(quantity) -> None:
    # bool is an int subclass; True is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(f"Quantity must be an integer, got {quantity!r}")
    if quantity <= 0:
        raise ValidationError(f"Quantity must be positive, got {quantity}")


def _check_unit_cost(unit_cost) -> None:
    if unit_cost is None or isinstance(unit_cost, bool) or not isinstance(unit_cost, (int, float)):
        raise ValidationError(f"Unit cost must be a number, got {unit_cost!r}")
    if unit_cost < 0:
        raise ValidationError(f"Unit cost must not be negative, got {unit_cost}")


class StockLedger:
    """Lot and stock-transaction bookkeeping for store items"""

    def __init__(self, lot_numbers: Optional[IdGenerator] = None):
        self.lot_numbers = lot_numbers or DatedNumberGenerator(settings.lot_number_prefix)

    def get_store_item(self, db: Session, store_id: int, master_item_id: int) -> Optional[StoreItem]:
        return db.query(StoreItem).filter(
            StoreItem.store_id == store_id,
            StoreItem.master_item_id == master_item_id
        ).first()

    def get_or_create_store_item(self, db: Session, store_id: int, master_item_id: int) -> StoreItem:
        store_item = self.get_store_item(db, store_id, master_item_id)
        if store_item:
            return store_item

        store_item = StoreItem(store_id=store_id, master_item_id=master_item_id, quantity=0)
        db.add(store_item)
        db.flush()  # Get the ID
        logger.info(f"Created store item {store_item.id} for master item {master_item_id} in store {store_id}")
        return store_item

    def receive_line(
        self,
        db: Session,
        store_id: int,
        master_item_id: int,
        quantity: int,
        unit_cost: float,
        received_date: date,
        pr_id: int,
        po_id: Optional[int] = None,
        supplier_name: Optional[str] = None,
        invoice_number: Optional[str] = None,
        notes: Optional[str] = None,
        user_id: Optional[int] = None,
        reference_number: Optional[str] = None
    ) -> LotReceipt:
        """
        Receive one line of goods into a store.

        Args:
            db: Database session (caller owns the transaction)
            store_id: Receiving store
            master_item_id: Catalog item received
            quantity: Positive integer quantity
            unit_cost: Actual unit cost (>= 0)
            received_date: Date goods arrived; also dates the lot number
            pr_id: Requisition the goods were requested on
            po_id: Purchase order, when receiving against one
            reference_number: Human-readable PO/PR number for the transaction

        Returns:
            LotReceipt with the new lot and the store item it belongs to

        Raises:
            ValidationError: quantity is not a positive integer or unit_cost is negative
        """
        _check_quantity(quantity)
        _check_unit_cost(unit_cost)

        store_item = self.get_or_create_store_item(db, store_id, master_item_id)

        lot_number = self.lot_numbers.next(received_date)
        lot = InventoryLot(
            store_item_id=store_item.id,
            lot_number=lot_number,
            quantity=quantity,
            unit_cost=unit_cost,
            total_cost=quantity * unit_cost,
            remaining_quantity=quantity,
            received_date=received_date,
            pr_id=pr_id,
            po_id=po_id,
            supplier_name=supplier_name,
            invoice_number=invoice_number,
            notes=notes
        )
        db.add(lot)
        db.flush()  # Get lot.id for the transaction row

        store_item.quantity = (store_item.quantity or 0) + quantity

        if po_id is not None:
            reference_type, reference_id = "po", po_id
            description = f"Receive PO:{reference_number} Lot:{lot_number}" if reference_number else f"Receive Lot:{lot_number}"
        else:
            reference_type, reference_id = "pr", pr_id
            description = f"Receive PR:{reference_number} Lot:{lot_number}" if reference_number else f"Receive Lot:{lot_number}"

        db.add(StockTransaction(
            store_id=store_id,
            store_item_id=store_item.id,
            lot_id=lot.id,
            transaction_type="receive",
            quantity=quantity,
            unit_cost=unit_cost,
            reference_type=reference_type,
            reference_id=reference_id,
            reference_number=reference_number,
            user_id=user_id,
            notes=description
        ))
        db.flush()

        logger.info(f"Received {quantity} of master item {master_item_id} into store {store_id} as lot {lot_number}")
        return LotReceipt(lot_id=lot.id, lot_number=lot_number, store_item_id=store_item.id)
