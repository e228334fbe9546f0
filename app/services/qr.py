import base64
import io
import qrcode
from loguru import logger
from .deliveries import find_active, short
from .links import confirm_url
from .tokens import derive_sub_token
from ..models import now_ms


def make_qr_bytes(url: str) -> bytes:
    """Return QR PNG bytes for the provided URL."""
    img = qrcode.make(url)
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def to_data_url(png: bytes) -> str:
    return 'data:image/png;base64,' + base64.b64encode(png).decode('ascii')


def render_qr(token: str) -> bytes:
    """QR image for the confirmation URL of an active delivery.

    Raises DeliveryNotFound when the token is missing, used or expired.
    """
    find_active(token)
    timestamp = now_ms()
    sub_token = derive_sub_token(token, timestamp)
    url = confirm_url(token, sub_token, timestamp)
    logger.debug("qr for {} at {}", short(token), timestamp)
    return make_qr_bytes(url)
