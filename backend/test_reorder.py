import pytest

from conftest import NOW, make_item
from reorder.debounce import DebounceGuard, REORDER_DEBOUNCE_SECONDS
from reorder.eligibility import is_eligible, select_eligible
from reorder.models import CompanyProfile, InventoryItem, Vendor
from reorder.notifications import NotificationCenter, NotificationKind
from reorder.synthesizer import SequentialNumberGenerator, synthesize_purchase_order
from reorder.vendor_email import compose_reorder_email


# ── Eligibility ───────────────────────────────────────────────

def test_low_stock_item_with_vendor_is_eligible():
    item = make_item(quantity=5, reorder_level=10, auto_reorder_quantity=50, vendor_id='v1')
    assert is_eligible(item)


@pytest.mark.parametrize('overrides', [
    {'auto_reorder_quantity': 0},
    {'auto_reorder_enabled': False},
    {'quantity': 11, 'reorder_level': 10},
    {'vendor_id': None},
    {'vendor_id': ''},
])
def test_item_not_eligible(overrides):
    fields = {'quantity': 5, 'reorder_level': 10, 'auto_reorder_quantity': 50, 'vendor_id': 'v1'}
    fields.update(overrides)
    assert not is_eligible(make_item(**fields))


def test_stock_exactly_at_reorder_level_is_eligible():
    assert is_eligible(make_item(quantity=10, reorder_level=10))


def test_select_eligible_preserves_input_order():
    items = [make_item(id='z'), make_item(id='skip', quantity=99), make_item(id='a'), make_item(id='m')]
    assert [i.id for i in select_eligible(items)] == ['z', 'a', 'm']


# ── Debounce guard ────────────────────────────────────────────

def test_debounce_unknown_item_is_not_skipped():
    assert not DebounceGuard().should_skip('item-1', NOW)


def test_debounce_window_boundaries():
    guard = DebounceGuard()
    guard.record_attempt('item-1', NOW)

    assert guard.should_skip('item-1', NOW)
    assert guard.should_skip('item-1', NOW + REORDER_DEBOUNCE_SECONDS - 1)
    assert not guard.should_skip('item-1', NOW + REORDER_DEBOUNCE_SECONDS)
    assert not guard.should_skip('other', NOW)


def test_debounce_record_overwrites_previous_attempt():
    guard = DebounceGuard()
    guard.record_attempt('item-1', NOW)
    guard.record_attempt('item-1', NOW + 10)
    assert guard.last_attempt('item-1') == NOW + 10
    assert len(guard) == 1


def test_debounce_uses_injected_backing_store():
    backing = {'item-1': NOW}
    guard = DebounceGuard(backing)

    assert guard.should_skip('item-1', NOW + 60)
    guard.record_attempt('item-2', NOW)
    assert backing['item-2'] == NOW

    guard.clear()
    assert backing == {}


def test_debounce_snapshot_is_iso_utc():
    guard = DebounceGuard()
    guard.record_attempt('item-1', NOW)
    assert guard.snapshot() == {'item-1': '2026-03-14T12:00:00+00:00'}


# ── Order synthesis ───────────────────────────────────────────

def test_synthesized_order_total_is_quantity_times_unit_cost():
    item = make_item(auto_reorder_quantity=100, unit_cost=15.00)
    order = synthesize_purchase_order(item, Vendor(id='v1', name='Acme'), 'PO20260314001', NOW)

    assert order.total_amount == 1500.00
    assert order.total_amount == item.auto_reorder_quantity * item.unit_cost


def test_synthesized_order_fields():
    item = make_item()
    order = synthesize_purchase_order(item, Vendor(id='v1', name='Acme'), 'PO20260314001', NOW)

    assert order.type == 'Purchase'
    assert order.customer_supplier == 'Acme'
    assert order.date == '2026-03-14'
    assert order.due_date == '2026-03-14'
    assert order.status == 'New Order'
    assert order.order_type == 'Wholesale'
    assert order.shipping_method == 'Standard'
    assert order.terms == 'Net 30'
    assert order.notes == 'Auto-generated reorder for low stock of Widget.'
    assert order.item_count == 1
    line = order.items[0]
    assert (line.item_name, line.quantity, line.unit_price, line.inventory_item_id) == ('Widget', 20, 3.5, 'item-1')


def test_synthesis_requires_vendor():
    with pytest.raises(ValueError):
        synthesize_purchase_order(make_item(), None, 'PO20260314001', NOW)


def test_po_sequence_restarts_each_day():
    numbers = SequentialNumberGenerator()

    assert numbers.next('PO', NOW) == 'PO20260314001'
    assert numbers.next('PO', NOW + 60) == 'PO20260314002'
    assert numbers.next('SO', NOW) == 'SO20260314001'
    assert numbers.next('PO', NOW + 24 * 3600) == 'PO20260315001'


# ── Row mapping ───────────────────────────────────────────────

def test_inventory_row_mapping_sums_bins_and_coerces_bad_numbers():
    item = InventoryItem.from_row({
        'id': 42,
        'name': 'Bolt',
        'sku': 'B-1',
        'picking_bin_quantity': '3',
        'overstock_quantity': 4,
        'reorder_level': None,
        'auto_reorder_enabled': True,
        'auto_reorder_quantity': 'abc',
        'vendor_id': '',
        'unit_cost': '1.25',
    })

    assert item.id == '42'
    assert item.quantity == 7
    assert item.reorder_level == 0
    assert item.auto_reorder_quantity == 0
    assert item.vendor_id is None
    assert item.unit_cost == 1.25


def test_company_profile_defaults_to_disabled():
    profile = CompanyProfile.from_row({'name': 'Acme'})
    assert not profile.enable_auto_reorder
    assert not profile.enable_auto_reorder_notifications


def test_order_row_uses_po_number_and_camel_case_items():
    order = synthesize_purchase_order(make_item(), Vendor(id='v1', name='Acme'), 'PO20260314001', NOW)
    row = order.to_row('org-1', 'user-9')

    assert row['id'] == 'PO20260314001'
    assert row['organization_id'] == 'org-1'
    assert row['user_id'] == 'user-9'
    assert row['putaway_status'] == 'Pending'
    assert row['items'] == [{
        'id': int(NOW * 1000),
        'itemName': 'Widget',
        'quantity': 20,
        'unitPrice': 3.5,
        'inventoryItemId': 'item-1',
    }]


# ── Vendor email ──────────────────────────────────────────────

def test_reorder_email_content():
    item = make_item(auto_reorder_quantity=100, unit_cost=15)
    vendor = Vendor(id='v1', name='Acme', email='po@acme.test')
    order = synthesize_purchase_order(item, vendor, 'PO20260314001', NOW)

    email = compose_reorder_email(item, vendor, order)

    assert email['to'] == 'po@acme.test'
    assert email['subject'] == 'New Purchase Order: PO20260314001 for Widget'
    assert 'Dear Acme,' in email['htmlContent']
    assert 'Widget (SKU: WID-001)' in email['htmlContent']
    assert '<strong>Quantity:</strong> 100 units' in email['htmlContent']
    assert '$15.00' in email['htmlContent']
    assert 'Total amount: $1500.00' in email['htmlContent']
    assert 'by 2026-03-14' in email['htmlContent']


# ── Notification center ───────────────────────────────────────

def test_notification_center_newest_first_and_read_tracking():
    center = NotificationCenter()
    first = center.add('one', NotificationKind.SUCCESS)
    center.add('two', NotificationKind.ERROR)

    assert [n['message'] for n in center.entries()] == ['two', 'one']
    assert center.entries()[0]['type'] == 'error'
    assert center.unread_count == 2

    assert center.mark_read(first['id'])['is_read']
    assert center.unread_count == 1
    assert center.mark_read('missing') is None

    center.mark_all_read()
    assert center.unread_count == 0
    center.clear()
    assert center.entries() == []


def test_notification_center_caps_entries():
    center = NotificationCenter(max_entries=2)
    for message in ('a', 'b', 'c'):
        center.add(message)
    assert [n['message'] for n in center.entries()] == ['c', 'b']
