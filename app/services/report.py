from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from flask import current_app, render_template
from loguru import logger
from . import pdf
from ..errors import EmptyReport
from ..models import ConfirmedDelivery


def format_arrival(iso: str, tz: str) -> str:
    """``dd/mm/YYYY, hh:MM AM`` in the report timezone."""
    try:
        dt = datetime.fromisoformat(iso.replace('Z', '+00:00'))
    except (AttributeError, ValueError):
        return 'Invalid date'
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(ZoneInfo(tz)).strftime('%d/%m/%Y, %I:%M %p')


def report_rows(entries: list[ConfirmedDelivery], tz: str) -> list[dict]:
    # newest first
    return [
        {
            'client': e.client,
            'route': e.route,
            'products': e.summary or 'No products',
            'arrived': format_arrival(e.arrived_at, tz),
        }
        for e in reversed(entries)
    ]


def build_report_html(entries: list[ConfirmedDelivery]) -> str:
    tz = current_app.config['REPORT_TIMEZONE']
    generated = format_arrival(datetime.now(timezone.utc).isoformat(), tz)
    return render_template('report.html', rows=report_rows(entries, tz), total=len(entries), generated=generated)


def render_report(entries: list[ConfirmedDelivery]) -> bytes:
    if not entries:
        raise EmptyReport('no confirmed deliveries to render')
    logger.info("rendering report with {} rows", len(entries))
    out = pdf.html_to_pdf(build_report_html(entries))
    logger.info("report rendered ({} bytes)", len(out))
    return out
