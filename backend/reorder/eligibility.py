from typing import Iterable, List

from reorder.models import InventoryItem


def is_eligible(item: InventoryItem) -> bool:
    """Item-level trigger conditions; the organization toggle is checked by the caller."""
    return (
        item.auto_reorder_enabled
        and item.quantity <= item.reorder_level
        and item.auto_reorder_quantity > 0
        and bool(item.vendor_id)
    )


def select_eligible(items: Iterable[InventoryItem]) -> List[InventoryItem]:
    """Returns the items that qualify for auto-reorder, in input order."""
    return [item for item in items if is_eligible(item)]
