from app.models.department import Department
from app.models.store import Store
from app.models.user import User
from app.models.master_item import MasterItem
from app.models.store_item import StoreItem
from app.models.purchase_requisition import PurchaseRequisition
from app.models.pr_item import PRItem
from app.models.purchase_order import PurchaseOrder
from app.models.inventory_lot import InventoryLot
from app.models.stock_transaction import StockTransaction
from app.models.notification import Notification

__all__ = ["Department", "Store", "User", "MasterItem", "StoreItem", "PurchaseRequisition", "PRItem", "PurchaseOrder", "InventoryLot", "StockTransaction", "Notification"]
