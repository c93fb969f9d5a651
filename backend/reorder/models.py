"""
Domain models for the auto-reorder engine.
Inventory, vendor and organization records are read-only snapshots loaded
from Supabase; PurchaseOrder is the value the engine hands to the order store.
"""
import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def _as_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def _as_float(value: Any) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(parsed) else parsed


class InventoryItem(BaseModel):
    id: str
    name: str = ''
    sku: str = ''
    quantity: int = 0
    reorder_level: int = 0
    auto_reorder_enabled: bool = False
    auto_reorder_quantity: int = 0
    vendor_id: Optional[str] = None
    unit_cost: float = 0.0

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'InventoryItem':
        """Maps an `inventory_items` row; on-hand quantity is picking bin + overstock."""
        quantity = _as_int(row.get('picking_bin_quantity')) + _as_int(row.get('overstock_quantity'))
        return cls(
            id=str(row['id']),
            name=row.get('name') or '',
            sku=row.get('sku') or '',
            quantity=quantity,
            reorder_level=_as_int(row.get('reorder_level')),
            auto_reorder_enabled=bool(row.get('auto_reorder_enabled') or False),
            auto_reorder_quantity=_as_int(row.get('auto_reorder_quantity')),
            vendor_id=row.get('vendor_id') or None,
            unit_cost=_as_float(row.get('unit_cost')),
        )


class Vendor(BaseModel):
    id: str
    name: str = ''
    email: Optional[str] = None
    contact_person: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'Vendor':
        return cls(
            id=str(row['id']),
            name=row.get('name') or '',
            email=row.get('email') or None,
            contact_person=row.get('contact_person') or None,
        )


class CompanyProfile(BaseModel):
    enable_auto_reorder: bool = False
    enable_auto_reorder_notifications: bool = False

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'CompanyProfile':
        return cls(
            enable_auto_reorder=bool(row.get('enable_auto_reorder') or False),
            enable_auto_reorder_notifications=bool(row.get('enable_auto_reorder_notifications') or False),
        )


class OrganizationProfile(BaseModel):
    organization_id: Optional[str] = None
    company_profile: Optional[CompanyProfile] = None

    @property
    def auto_reorder_enabled(self) -> bool:
        return bool(self.organization_id) and bool(self.company_profile and self.company_profile.enable_auto_reorder)

    @property
    def reorder_notifications_enabled(self) -> bool:
        return bool(self.company_profile and self.company_profile.enable_auto_reorder_notifications)


class POItem(BaseModel):
    """One purchase-order line. Serialized with the camelCase keys stored in `orders.items`."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    item_name: str = Field(alias='itemName')
    quantity: int
    unit_price: float = Field(alias='unitPrice')
    inventory_item_id: Optional[str] = Field(default=None, alias='inventoryItemId')


class PurchaseOrder(BaseModel):
    po_number: str
    type: Literal['Purchase'] = 'Purchase'
    customer_supplier: str
    date: str
    due_date: str
    status: str = 'New Order'
    items: List[POItem]
    item_count: int
    total_amount: float
    notes: str = ''
    order_type: str = 'Wholesale'
    shipping_method: str = 'Standard'
    terms: str = 'Net 30'

    def to_row(self, organization_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """Row for the `orders` table; the PO number doubles as the order id."""
        return {
            'id': self.po_number,
            'type': self.type,
            'customer_supplier': self.customer_supplier,
            'created_at': self.date,
            'status': self.status,
            'total_amount': self.total_amount,
            'due_date': self.due_date,
            'item_count': self.item_count,
            'notes': self.notes,
            'order_type': self.order_type,
            'shipping_method': self.shipping_method,
            'items': [item.model_dump(by_alias=True) for item in self.items],
            'terms': self.terms,
            'user_id': user_id,
            'organization_id': organization_id,
            'putaway_status': 'Pending',
        }
