"""
Per-item LangGraph state for the auto-reorder dispatch pipeline.
One state object flows through the graph for each eligible item.
"""
from typing import TypedDict, Optional, List

from reorder.models import InventoryItem, PurchaseOrder, Vendor


class ReorderState(TypedDict, total=False):
    # ── Tick context ──────────────────────────────────────────
    run_id: str
    now: float                      # epoch seconds for this item
    vendors: List[Vendor]
    notifications_enabled: bool

    # ── Item under evaluation ─────────────────────────────────
    item: InventoryItem
    vendor: Optional[Vendor]

    # ── Synthesized order ─────────────────────────────────────
    purchase_order: Optional[PurchaseOrder]

    # ── Result ────────────────────────────────────────────────
    outcome: str                    # 'skipped' | 'vendor_missing' | 'ordered' | 'submission_failed'
    email_status: Optional[str]     # 'sent' | 'failed' | 'no_email'
    error: Optional[str]
    current_step: str
