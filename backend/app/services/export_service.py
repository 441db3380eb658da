"""
Export Service - projects a PR into the document sent to purchasing.

Purchasing buys outside the system and fills in the purchasing section
(PO number, supplier, actual prices); those values come back through the
receive-goods call.
"""
from typing import Iterable, Optional

from app.models.purchase_order import PurchaseOrder
from app.schemas.export import ExportLine, ExportPurchaseOrder, PurchasingDocument, PurchasingSection
from app.schemas.pr import PRDetailResponse
from app.utils.pr_rules import line_total


def build_purchasing_document(
    pr: PRDetailResponse,
    purchase_orders: Optional[Iterable[PurchaseOrder]] = None,
    include_purchasing_section: bool = True
) -> PurchasingDocument:
    """
    Build the purchasing document for a PR.

    Pure function of its inputs: the same PR and POs always give the same
    document.

    Args:
        pr: PR detail as returned by PRRepository.get_pr_by_id
        purchase_orders: POs already recorded against the PR
        include_purchasing_section: Add the blank block purchasing fills in

    Returns:
        PurchasingDocument
    """
    items = [
        ExportLine(
            no=item.id,
            sku=item.sku,
            item_name=item.item_name,
            description=item.description or "",
            unit=item.unit,
            quantity_requested=item.quantity,
            estimated_price=item.estimated_unit_cost or 0,
            estimated_total=line_total(item.quantity, item.estimated_unit_cost),
            received_quantity=item.received_quantity or 0,
            pending_quantity=item.quantity - (item.received_quantity or 0),
            notes=item.notes or ""
        )
        for item in pr.items
    ]

    return PurchasingDocument(
        pr_number=pr.pr_number,
        status=pr.status,
        pr_date=pr.created_at,
        required_date=pr.required_date,
        priority=pr.priority,
        requester=pr.requester_name,
        approver=pr.approver_name,
        approved_at=pr.approved_at,
        department=pr.department_name,
        store=pr.store_name,
        notes=pr.notes,
        items=items,
        total_items=len(items),
        total_quantity=sum(line.quantity_requested for line in items),
        total_estimated_amount=sum(line.estimated_total for line in items),
        purchase_orders=[
            ExportPurchaseOrder(
                po_number=po.po_number,
                supplier_name=po.supplier_name,
                order_date=po.order_date,
                received_date=po.actual_delivery_date
            )
            for po in (purchase_orders or [])
        ],
        purchasing_section=PurchasingSection() if include_purchasing_section else None
    )
