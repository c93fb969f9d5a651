"""
Supabase Client: collaborators the auto-reorder engine talks to.
Loads an organization's snapshot, persists purchase orders and invokes the
send-email Edge Function. supabase-py is blocking, so every call runs in a
worker thread to keep the tick loop cooperative.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from supabase import Client, create_client

from config import automation_credentials, supabase_settings
from reorder.models import CompanyProfile, InventoryItem, OrganizationProfile, PurchaseOrder, Vendor
from reorder.vendor_email import EmailDispatchError

logger = logging.getLogger(__name__)

SEND_EMAIL_FUNCTION = 'send-email'


def get_client() -> Client:
    url, key = supabase_settings()
    if not url or not key:
        raise RuntimeError(
            "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are not configured. Add them to the repo root .env or backend/.env."
        )
    client = create_client(url, key)

    credentials = automation_credentials()
    if credentials:
        email, password = credentials
        client.auth.sign_in_with_password({'email': email, 'password': password})
        logger.info('Signed in to Supabase as automation user %s', email)
    return client


@dataclass
class OrganizationSnapshot:
    profile: OrganizationProfile
    inventory: List[InventoryItem] = field(default_factory=list)
    vendors: List[Vendor] = field(default_factory=list)


def fetch_organization_profile(client: Client, organization_id: str) -> OrganizationProfile:
    result = client.table('organizations').select('*').eq('id', organization_id).limit(1).execute()
    rows = result.data or []
    company = CompanyProfile.from_row(rows[0]) if rows else None
    return OrganizationProfile(organization_id=organization_id, company_profile=company)


def fetch_inventory(client: Client, organization_id: str) -> List[InventoryItem]:
    result = client.table('inventory_items').select('*').eq('organization_id', organization_id).execute()
    return [InventoryItem.from_row(row) for row in result.data or []]


def fetch_vendors(client: Client, organization_id: str) -> List[Vendor]:
    result = (
        client.table('vendors')
        .select('*')
        .eq('organization_id', organization_id)
        .order('name')
        .execute()
    )
    return [Vendor.from_row(row) for row in result.data or []]


def load_organization_snapshot(client: Client, organization_id: str) -> OrganizationSnapshot:
    return OrganizationSnapshot(
        profile=fetch_organization_profile(client, organization_id),
        inventory=fetch_inventory(client, organization_id),
        vendors=fetch_vendors(client, organization_id),
    )


class SupabaseOrderStore:
    """Order Store backed by the `orders` table."""

    def __init__(self, client: Client, organization_id: str, user_id: Optional[str] = None):
        self.client = client
        self.organization_id = organization_id
        self.user_id = user_id

    async def add_order(self, order: PurchaseOrder) -> None:
        row = order.to_row(self.organization_id, self.user_id)
        await asyncio.to_thread(self._insert, row)
        logger.info('Created %s order %s for %s', order.type, order.po_number, order.customer_supplier)

    def _insert(self, row: dict) -> None:
        self.client.table('orders').insert(row).execute()


class SupabaseEmailDispatcher:
    """Sends vendor emails through the send-email Edge Function using the current session."""

    def __init__(self, client: Client):
        self.client = client

    async def send(self, to: str, subject: str, html_content: str) -> None:
        session = await asyncio.to_thread(self.client.auth.get_session)
        if session is None or not session.access_token:
            raise EmailDispatchError('No active session for sending email')

        try:
            response = await asyncio.to_thread(
                self.client.functions.invoke,
                SEND_EMAIL_FUNCTION,
                {
                    'body': {'to': to, 'subject': subject, 'htmlContent': html_content},
                    'headers': {
                        'Content-Type': 'application/json',
                        'Authorization': f'Bearer {session.access_token}',
                    },
                    'responseType': 'json',
                },
            )
        except Exception as exc:
            raise EmailDispatchError(f'send-email invocation failed: {exc}') from exc
        if isinstance(response, dict) and response.get('error'):
            raise EmailDispatchError(f"send-email returned error: {response['error']}")
