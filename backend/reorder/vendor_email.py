from typing import Awaitable, Callable, Dict

from reorder.models import InventoryItem, PurchaseOrder, Vendor

# (to, subject, html_content) -> None; raises on failure
SendEmail = Callable[[str, str, str], Awaitable[None]]

SENDER_NAME = 'Fortress Inventory'


class EmailDispatchError(RuntimeError):
    """Raised when the vendor email could not be handed to the send-email function."""


def compose_reorder_email(item: InventoryItem, vendor: Vendor, order: PurchaseOrder) -> Dict[str, str]:
    subject = f'New Purchase Order: {order.po_number} for {item.name}'
    html_content = f"""
<p>Dear {vendor.contact_person or vendor.name},</p>
<p>This is an automated purchase order from {SENDER_NAME} for the following item:</p>
<ul>
  <li><strong>Item:</strong> {item.name} (SKU: {item.sku})</li>
  <li><strong>Quantity:</strong> {item.auto_reorder_quantity} units</li>
  <li><strong>Unit Cost:</strong> ${item.unit_cost:.2f}</li>
</ul>
<p>Total amount: ${order.total_amount:.2f}</p>
<p>Please process this order (PO: {order.po_number}) by {order.due_date}.</p>
<p>Thank you,<br>{SENDER_NAME}</p>
"""
    return {'to': vendor.email or '', 'subject': subject, 'htmlContent': html_content}
