"""Dry run: shows which items the auto-reorder engine would order for an organization."""
import os
import sys

sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'backend'))

from reorder.eligibility import select_eligible
from supabase_client.client import get_client, load_organization_snapshot

if len(sys.argv) != 2:
    print("Usage: python verify_db.py <organization_id>")
    sys.exit(1)

organization_id = sys.argv[1]
snapshot = load_organization_snapshot(get_client(), organization_id)

print(f"Total inventory rows: {len(snapshot.inventory)}")
print(f"Vendors: {len(snapshot.vendors)}")
print(f"Auto-reorder enabled: {snapshot.profile.auto_reorder_enabled}")
print(f"Vendor emails enabled: {snapshot.profile.reorder_notifications_enabled}")

eligible = select_eligible(snapshot.inventory)
vendor_names = {v.id: v.name for v in snapshot.vendors}
print(f"Items eligible for auto-reorder: {len(eligible)}")
for item in eligible:
    vendor = vendor_names.get(item.vendor_id, 'MISSING VENDOR')
    total = item.auto_reorder_quantity * item.unit_cost
    print(f"  {item.sku or item.id}: {item.name} qty {item.quantity}/{item.reorder_level} "
          f"-> order {item.auto_reorder_quantity} from {vendor} (${total:,.2f})")

if not snapshot.profile.auto_reorder_enabled:
    print("Auto-reorder is disabled for this organization; no orders would be placed.")
