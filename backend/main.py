from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional
import asyncio
import logging

from config import configure_logging, supabase_configured
from graph.pipeline import AutoReorderEngine
from reorder.debounce import DebounceGuard, REORDER_DEBOUNCE_SECONDS
from reorder.notifications import LogToaster, NotificationCenter
from reorder.synthesizer import SequentialNumberGenerator
from supabase_client.client import (
    SupabaseEmailDispatcher,
    SupabaseOrderStore,
    get_client,
    load_organization_snapshot,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title='Auto-Reorder Engine',
    description='Automatic replenishment purchase orders for low-stock inventory',
    version='0.1.0'
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['http://localhost:3000', 'https://*.vercel.app'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

# Process-lifetime state shared by every tick
debounce_guard = DebounceGuard()
notification_center = NotificationCenter()
po_numbers = SequentialNumberGenerator()
toaster = LogToaster()
tick_lock = asyncio.Lock()


@app.get('/health')
def health_check():
    return {
        'status': 'ok',
        'service': 'auto-reorder-engine',
        'supabase_configured': supabase_configured(),
        'cooldown_hours': REORDER_DEBOUNCE_SECONDS / 3600,
    }


# ─── REQUEST MODELS ───────────────────────────────────────────

class AutoReorderRunRequest(BaseModel):
    organization_id: str
    user_id: Optional[str] = None


# ─── AUTO-REORDER ENDPOINTS ───────────────────────────────────

@app.post('/auto-reorder/run')
async def run_auto_reorder(request: AutoReorderRunRequest):
    """
    Runs one evaluation tick for the organization.
    Loads inventory, vendors and company settings from Supabase, then places
    purchase orders for every eligible item not reordered in the last 24 hours.
    Ticks are serialized so the debounce check and record cannot interleave.
    """
    async with tick_lock:
        try:
            client = await asyncio.to_thread(get_client)
            snapshot = await asyncio.to_thread(load_organization_snapshot, client, request.organization_id)
        except Exception as e:
            logger.error('Could not load snapshot for organization %s: %s', request.organization_id, e)
            raise HTTPException(status_code=500, detail=str(e))

        engine = AutoReorderEngine(
            SupabaseOrderStore(client, request.organization_id, request.user_id).add_order,
            debounce=debounce_guard,
            add_notification=notification_center.add,
            show_toast=toaster,
            send_email=SupabaseEmailDispatcher(client).send,
            numbers=po_numbers,
        )
        summary = await engine.process(snapshot.inventory, snapshot.vendors, snapshot.profile)
    return summary.model_dump()


@app.get('/auto-reorder/attempts')
def get_reorder_attempts():
    """Last auto-reorder attempt per item (UTC)."""
    return {'attempts': debounce_guard.snapshot()}


# ─── NOTIFICATION ENDPOINTS ───────────────────────────────────

@app.get('/notifications')
def get_notifications():
    return {
        'notifications': notification_center.entries(),
        'unread_count': notification_center.unread_count,
    }


@app.post('/notifications/read-all')
def mark_all_notifications_read():
    notification_center.mark_all_read()
    return {'status': 'ok', 'unread_count': 0}


@app.post('/notifications/{notification_id}/read')
def mark_notification_read(notification_id: str):
    entry = notification_center.mark_read(notification_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f'Notification {notification_id} not found')
    return entry


@app.delete('/notifications')
def clear_notifications():
    notification_center.clear()
    return {'status': 'ok'}
