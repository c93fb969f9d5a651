"""
LangGraph Pipeline: Auto-Reorder Dispatch
Runs every eligible item through debounce → vendor lookup → order synthesis →
submission → vendor notification. Items are processed strictly one after
another; a failure on one item never stops the rest of the tick.
"""
import logging
import time
import uuid
from typing import Awaitable, Callable, Iterable, List, Optional

from langgraph.graph import StateGraph, END
from pydantic import BaseModel

from graph.state import ReorderState
from reorder.debounce import DebounceGuard
from reorder.eligibility import select_eligible
from reorder.models import InventoryItem, OrganizationProfile, PurchaseOrder, Vendor
from reorder.notifications import LogToaster, NotificationCenter, NotificationKind
from reorder.synthesizer import SequentialNumberGenerator, synthesize_purchase_order
from reorder.vendor_email import EmailDispatchError, SendEmail, compose_reorder_email

logger = logging.getLogger(__name__)

AddOrder = Callable[[PurchaseOrder], Awaitable[None]]
Notify = Callable[[str, NotificationKind], None]


class ItemOutcome(BaseModel):
    item_id: str
    item_name: str
    outcome: str
    po_number: Optional[str] = None
    total_amount: Optional[float] = None
    email_status: Optional[str] = None
    error: Optional[str] = None


class TickSummary(BaseModel):
    run_id: str
    gated: bool = False
    evaluated: int = 0
    outcomes: List[ItemOutcome] = []

    def count(self, outcome: str) -> int:
        return sum(1 for o in self.outcomes if o.outcome == outcome)


def route_after_debounce(state: ReorderState) -> str:
    if state.get('outcome') == 'skipped':
        return 'end'
    return 'resolve_vendor'


def route_after_vendor(state: ReorderState) -> str:
    if state.get('vendor') is None:
        return 'end'
    return 'synthesize_order'


def route_after_submit(state: ReorderState) -> str:
    """Email is only attempted for placed orders when the organization opted in."""
    if state.get('outcome') != 'ordered':
        return 'end'
    if not state.get('notifications_enabled'):
        return 'end'
    if state['vendor'].email:
        return 'dispatch_email'
    return 'flag_missing_email'


class AutoReorderEngine:
    """
    Dispatch coordinator for automatic replenishment.
    All collaborators are injected: the order store, notification sink,
    toast surface, email dispatch and the debounce guard itself.
    """

    def __init__(
        self,
        add_order: AddOrder,
        *,
        debounce: DebounceGuard | None = None,
        add_notification: Notify | None = None,
        show_toast: Notify | None = None,
        send_email: SendEmail | None = None,
        numbers: SequentialNumberGenerator | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.add_order = add_order
        self.debounce = debounce if debounce is not None else DebounceGuard()
        self.add_notification = add_notification if add_notification is not None else NotificationCenter().add
        self.show_toast = show_toast if show_toast is not None else LogToaster()
        self.send_email = send_email
        self.numbers = numbers if numbers is not None else SequentialNumberGenerator()
        self.clock = clock
        self.pipeline = self._build_pipeline()

    def _build_pipeline(self):
        graph = StateGraph(ReorderState)

        graph.add_node('debounce_guard',     self._debounce_guard_node)
        graph.add_node('resolve_vendor',     self._resolve_vendor_node)
        graph.add_node('synthesize_order',   self._synthesize_order_node)
        graph.add_node('submit_order',       self._submit_order_node)
        graph.add_node('dispatch_email',     self._dispatch_email_node)
        graph.add_node('flag_missing_email', self._flag_missing_email_node)

        graph.set_entry_point('debounce_guard')

        graph.add_conditional_edges('debounce_guard', route_after_debounce, {'resolve_vendor': 'resolve_vendor', 'end': END})
        graph.add_conditional_edges('resolve_vendor', route_after_vendor,   {'synthesize_order': 'synthesize_order', 'end': END})
        graph.add_edge('synthesize_order', 'submit_order')
        graph.add_conditional_edges('submit_order',   route_after_submit,   {
            'dispatch_email': 'dispatch_email',
            'flag_missing_email': 'flag_missing_email',
            'end': END,
        })
        graph.add_edge('dispatch_email', END)
        graph.add_edge('flag_missing_email', END)

        return graph.compile()

    # ── Nodes ──────────────────────────────────────────────────

    def _debounce_guard_node(self, state: ReorderState) -> dict:
        item = state['item']
        if self.debounce.should_skip(item.id, state['now']):
            logger.info('[Auto-Reorder] Skipping %s: already attempted recently.', item.name)
            return {'outcome': 'skipped', 'current_step': 'debounce_guard'}
        return {'current_step': 'debounce_guard'}

    def _resolve_vendor_node(self, state: ReorderState) -> dict:
        item = state['item']
        vendor = next((v for v in state.get('vendors', []) if v.id == item.vendor_id), None)
        if vendor is None:
            message = f'Auto-reorder failed for {item.name}.'
            self.add_notification(message, NotificationKind.ERROR)
            self.show_toast(message, NotificationKind.ERROR)
            return {
                'vendor': None,
                'outcome': 'vendor_missing',
                'error': f'Vendor {item.vendor_id} not found',
                'current_step': 'resolve_vendor',
            }
        return {'vendor': vendor, 'current_step': 'resolve_vendor'}

    def _synthesize_order_node(self, state: ReorderState) -> dict:
        po_number = self.numbers.next('PO', state['now'])
        order = synthesize_purchase_order(state['item'], state['vendor'], po_number, state['now'])
        return {'purchase_order': order, 'current_step': 'synthesize_order'}

    async def _submit_order_node(self, state: ReorderState) -> dict:
        item = state['item']
        try:
            await self.add_order(state['purchase_order'])
        except Exception as exc:
            logger.error('[Auto-Reorder] Order creation failed for %s: %s', item.name, exc)
            message = f'Failed to auto-reorder {item.name}.'
            self.add_notification(message, NotificationKind.ERROR)
            self.show_toast(message, NotificationKind.ERROR)
            return {'outcome': 'submission_failed', 'error': str(exc), 'current_step': 'submit_order'}

        self.debounce.record_attempt(item.id, state['now'])
        message = f'Auto-reorder placed for {item.name}.'
        self.add_notification(message, NotificationKind.SUCCESS)
        self.show_toast(message, NotificationKind.SUCCESS)
        return {'outcome': 'ordered', 'error': None, 'current_step': 'submit_order'}

    async def _dispatch_email_node(self, state: ReorderState) -> dict:
        vendor = state['vendor']
        order = state['purchase_order']
        email = compose_reorder_email(state['item'], vendor, order)
        try:
            if self.send_email is None:
                raise EmailDispatchError('No email dispatcher configured')
            await self.send_email(email['to'], email['subject'], email['htmlContent'])
        except Exception as exc:
            logger.error('[Auto-Reorder] Failed to send reorder email for %s: %s', order.po_number, exc)
            self.add_notification('Failed to send reorder email.', NotificationKind.ERROR)
            return {'email_status': 'failed', 'error': str(exc), 'current_step': 'dispatch_email'}

        logger.info('[Auto-Reorder] Reorder email for %s sent to %s', order.po_number, vendor.email)
        self.add_notification(f'Reorder email sent to {vendor.email}.', NotificationKind.INFO)
        return {'email_status': 'sent', 'current_step': 'dispatch_email'}

    def _flag_missing_email_node(self, state: ReorderState) -> dict:
        vendor = state['vendor']
        self.add_notification(f'No email for vendor {vendor.name}.', NotificationKind.WARNING)
        return {'email_status': 'no_email', 'current_step': 'flag_missing_email'}

    # ── Tick ───────────────────────────────────────────────────

    async def process(
        self,
        inventory_items: Iterable[InventoryItem],
        vendors: Iterable[Vendor],
        profile: OrganizationProfile | None,
    ) -> TickSummary:
        """Runs one evaluation tick. Never raises for per-item failures."""
        run_id = str(uuid.uuid4())

        if profile is None or not profile.auto_reorder_enabled:
            logger.warning(
                '[Auto-Reorder] Cannot process auto-reorder: auto-reorder is not globally enabled or organization ID is missing.'
            )
            return TickSummary(run_id=run_id, gated=True)

        eligible = select_eligible(inventory_items)
        if not eligible:
            return TickSummary(run_id=run_id)

        logger.info('[Auto-Reorder] Processing %d item(s) for auto-reorder.', len(eligible))
        vendor_list = list(vendors)
        outcomes = []
        for item in eligible:
            outcomes.append(
                await self._process_item(run_id, item, vendor_list, profile.reorder_notifications_enabled)
            )
        return TickSummary(run_id=run_id, evaluated=len(eligible), outcomes=outcomes)

    async def _process_item(
        self,
        run_id: str,
        item: InventoryItem,
        vendors: List[Vendor],
        notifications_enabled: bool,
    ) -> ItemOutcome:
        initial_state: ReorderState = {
            'run_id': run_id,
            'now': self.clock(),
            'vendors': vendors,
            'notifications_enabled': notifications_enabled,
            'item': item,
            'vendor': None,
            'purchase_order': None,
            'email_status': None,
            'error': None,
            'current_step': 'coordinator',
        }
        try:
            final_state = await self.pipeline.ainvoke(initial_state)
        except Exception as exc:
            logger.exception('[Auto-Reorder] Unexpected failure while processing %s', item.name)
            return ItemOutcome(item_id=item.id, item_name=item.name, outcome='failed', error=str(exc))

        order = final_state.get('purchase_order')
        return ItemOutcome(
            item_id=item.id,
            item_name=item.name,
            outcome=final_state.get('outcome') or 'failed',
            po_number=order.po_number if order else None,
            total_amount=order.total_amount if order else None,
            email_status=final_state.get('email_status'),
            error=final_state.get('error'),
        )
