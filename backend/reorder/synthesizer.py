"""
Order Synthesizer
- Builds one single-line purchase order per eligible item
- Quantity and pricing come straight from the inventory record
- PO numbers follow PO{YYYYMMDD}{seq:03d}, sequence restarting daily
"""
from datetime import datetime, timezone
from typing import Dict, Tuple

from reorder.models import InventoryItem, POItem, PurchaseOrder, Vendor


class SequentialNumberGenerator:
    """Per-prefix daily sequence, held for the lifetime of the process."""

    def __init__(self):
        self._sequences: Dict[str, Tuple[str, int]] = {}

    def next(self, prefix: str, now: float) -> str:
        day = datetime.fromtimestamp(now, tz=timezone.utc).strftime('%Y%m%d')
        last_day, last_seq = self._sequences.get(prefix, (None, 0))
        sequence = last_seq + 1 if last_day == day else 1
        self._sequences[prefix] = (day, sequence)
        return f'{prefix}{day}{sequence:03d}'


def iso_day(now: float) -> str:
    return datetime.fromtimestamp(now, tz=timezone.utc).date().isoformat()


def synthesize_purchase_order(
    item: InventoryItem,
    vendor: Vendor,
    po_number: str,
    now: float,
) -> PurchaseOrder:
    if vendor is None:
        raise ValueError(f'Cannot synthesize an order for {item.name} without a vendor')

    today = iso_day(now)
    po_items = [
        POItem(
            id=int(now * 1000),
            item_name=item.name,
            quantity=item.auto_reorder_quantity,
            unit_price=item.unit_cost,
            inventory_item_id=item.id,
        )
    ]
    total_amount = sum(line.quantity * line.unit_price for line in po_items)

    return PurchaseOrder(
        po_number=po_number,
        customer_supplier=vendor.name,
        date=today,
        due_date=today,
        items=po_items,
        item_count=len(po_items),
        total_amount=total_amount,
        notes=f'Auto-generated reorder for low stock of {item.name}.',
    )
