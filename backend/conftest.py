from typing import List, Tuple

import pytest

from graph.pipeline import AutoReorderEngine
from reorder.debounce import DebounceGuard
from reorder.models import CompanyProfile, InventoryItem, OrganizationProfile, Vendor
from reorder.notifications import NotificationKind
from reorder.vendor_email import EmailDispatchError

# 2026-03-14T12:00:00Z
NOW = 1773489600.0


class FakeClock:
    def __init__(self, now: float = NOW):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingOrderStore:
    def __init__(self, fail_with: Exception | None = None):
        self.orders = []
        self.fail_with = fail_with

    async def add_order(self, order) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.orders.append(order)


class RecordingSink:
    def __init__(self):
        self.messages: List[Tuple[str, NotificationKind]] = []

    def __call__(self, message: str, kind: NotificationKind) -> None:
        self.messages.append((message, NotificationKind(kind)))

    def kinds(self) -> List[NotificationKind]:
        return [kind for _, kind in self.messages]


class FakeEmailSender:
    def __init__(self, fail: bool = False):
        self.sent = []
        self.fail = fail

    async def send(self, to: str, subject: str, html_content: str) -> None:
        if self.fail:
            raise EmailDispatchError('send-email returned error: quota exceeded')
        self.sent.append({'to': to, 'subject': subject, 'htmlContent': html_content})


def make_item(**overrides) -> InventoryItem:
    fields = {
        'id': 'item-1',
        'name': 'Widget',
        'sku': 'WID-001',
        'quantity': 2,
        'reorder_level': 5,
        'auto_reorder_enabled': True,
        'auto_reorder_quantity': 20,
        'vendor_id': 'v1',
        'unit_cost': 3.50,
    }
    fields.update(overrides)
    return InventoryItem(**fields)


def make_profile(enabled: bool = True, notifications: bool = False, organization_id: str | None = 'org-1') -> OrganizationProfile:
    return OrganizationProfile(
        organization_id=organization_id,
        company_profile=CompanyProfile(
            enable_auto_reorder=enabled,
            enable_auto_reorder_notifications=notifications,
        ),
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def order_store():
    return RecordingOrderStore()


@pytest.fixture
def notifications():
    return RecordingSink()


@pytest.fixture
def toasts():
    return RecordingSink()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def debounce():
    return DebounceGuard()


@pytest.fixture
def vendor():
    return Vendor(id='v1', name='Acme Supply')


@pytest.fixture
def engine(order_store, notifications, toasts, email_sender, debounce, clock):
    return AutoReorderEngine(
        order_store.add_order,
        debounce=debounce,
        add_notification=notifications,
        show_toast=toasts,
        send_email=email_sender.send,
        clock=clock,
    )
