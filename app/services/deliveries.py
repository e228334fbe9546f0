"""Persistence for the two delivery collections.

Each collection is a single JSON array stored under one blob key and is
rewritten whole on every mutation. Every load-mutate-save cycle runs under
the collection's lock (``pending_lock`` / ``confirmed_lock``). Read-time
compaction in ``load_pending`` writes too, so direct callers of
``load_pending`` must hold ``pending_lock``.
"""
import json
from loguru import logger
from .store import r, collection_lock
from ..errors import DeliveryNotFound, TokenCollision
from ..models import PendingDelivery, ConfirmedDelivery, now_ms

PENDING_KEY = 'pending-deliveries'
CONFIRMED_KEY = 'confirmed-deliveries'


def pending_lock():
    return collection_lock(PENDING_KEY)


def confirmed_lock():
    return collection_lock(CONFIRMED_KEY)


def short(token: str) -> str:
    return (token or '')[:8] + '…'


def _load_raw_pending() -> list[PendingDelivery]:
    raw = r().get(PENDING_KEY)
    if not raw:
        return []
    return [PendingDelivery.from_dict(d) for d in json.loads(raw)]


def _compact(entries: list[PendingDelivery]) -> list[PendingDelivery]:
    now = now_ms()
    active = [e for e in entries if e.is_active(now)]
    removed = len(entries) - len(active)
    if removed:
        save_pending(active)
        logger.debug("pending compaction: {} total -> {} active, removed {}", len(entries), len(active), removed)
    return active


def load_pending() -> list[PendingDelivery]:
    return _compact(_load_raw_pending())


def save_pending(entries: list[PendingDelivery]):
    r().set(PENDING_KEY, json.dumps([e.to_dict() for e in entries]))


def prune_pending() -> int:
    """Run read-time compaction explicitly; returns how many entries were dropped."""
    with pending_lock():
        entries = _load_raw_pending()
        return len(entries) - len(_compact(entries))


def _lookup(token: str) -> tuple[PendingDelivery, list[PendingDelivery]]:
    # The raw collection is inspected before compaction so the log can tell
    # a used token from an expired one.
    entries = _load_raw_pending()
    match = next((e for e in entries if e.token == token and e.is_active()), None)
    if match is None:
        stale = next((e for e in entries if e.token == token), None)
        if stale is None:
            reason = 'missing'
        elif stale.confirmed:
            reason = 'confirmed'
        else:
            reason = 'expired'
        _compact(entries)
        raise DeliveryNotFound(token, reason)
    return match, _compact(entries)


def find_active(token: str) -> PendingDelivery:
    """Active (unconfirmed, unexpired) delivery for ``token``; raises DeliveryNotFound."""
    with pending_lock():
        match, _ = _lookup(token)
    return match


def add_pending(entry: PendingDelivery):
    with pending_lock():
        entries = load_pending()
        if any(e.token == entry.token for e in entries):
            raise TokenCollision(short(entry.token))
        entries.append(entry)
        save_pending(entries)


def claim(token: str, arrived_at: str) -> PendingDelivery:
    """Mark the active delivery for ``token`` as confirmed and log it.

    Lookup, mutation and save happen under the pending lock, so of two
    concurrent claims on the same token exactly one succeeds; the other raises
    DeliveryNotFound with reason ``confirmed``. The entry is appended to the
    confirmed log before the consumed record is saved: if the append fails the
    token stays active. Lock order is pending, then confirmed.
    """
    with pending_lock():
        match, active = _lookup(token)
        match.confirmed = True
        match.arrived_at = arrived_at
        append_confirmed(ConfirmedDelivery.from_pending(match))
        save_pending(active)
    return match


def load_confirmed() -> list[ConfirmedDelivery]:
    raw = r().get(CONFIRMED_KEY)
    if not raw:
        return []
    return [ConfirmedDelivery.from_dict(d) for d in json.loads(raw)]


def save_confirmed(entries: list[ConfirmedDelivery]):
    r().set(CONFIRMED_KEY, json.dumps([e.to_dict() for e in entries]))


def append_confirmed(entry: ConfirmedDelivery):
    with confirmed_lock():
        entries = load_confirmed()
        entries.append(entry)
        save_confirmed(entries)
    logger.bind(audit=True).info(
        "confirmed | client={} | route={} | arrived_at={} | products={}",
        entry.client, entry.route, entry.arrived_at, entry.summary,
    )


def clear_confirmed():
    with confirmed_lock():
        r().delete(CONFIRMED_KEY)
    logger.bind(audit=True).info("confirmed log cleared")
