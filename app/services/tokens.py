import base64, json, secrets
from dataclasses import dataclass
from flask import current_app
from loguru import logger
from .deliveries import add_pending, short
from .links import claim_url
from ..models import PendingDelivery, Product, now_ms


@dataclass
class IssuedToken:
    token: str
    claim_url: str


# Scan timestamps may run this far ahead of the server clock
CLOCK_SKEW_MS = 5 * 60 * 1000


def ttl_ms() -> int:
    return current_app.config['TOKEN_TTL_HOURS'] * 60 * 60 * 1000


def new_token() -> str:
    # 128 bits from the OS CSPRNG
    return secrets.token_hex(16)


# Confirmation sub-token: short, deterministic, unkeyed. Not a security boundary.
def derive_sub_token(token: str, timestamp) -> str:
    return base64.b64encode(f"{token}{timestamp}".encode()).decode('ascii')[:10]


def sub_token_valid(token: str, sub_token: str, timestamp) -> bool:
    try:
        ts = int(str(timestamp))
    except (TypeError, ValueError):
        return False
    if not sub_token or not secrets.compare_digest(str(sub_token).encode(), derive_sub_token(token, timestamp).encode()):
        return False
    now = now_ms()
    return ts <= now + CLOCK_SKEW_MS and now <= ts + ttl_ms()


def parse_products(raw: str | None) -> list[Product]:
    """Parse the admin's ``productos`` JSON; anything malformed degrades to []."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("productos parse failed ({}), using []", e)
        return []
    if not isinstance(data, list):
        logger.warning("productos is not a list ({}), using []", type(data).__name__)
        return []
    products = [Product.from_input(item) for item in data]
    return [p for p in products if p is not None]


def issue_token(client: str, route: str, products: list[Product]) -> IssuedToken:
    token = new_token()
    entry = PendingDelivery(
        token=token,
        client=client,
        route=route,
        products=products,
        expires_at=now_ms() + ttl_ms(),
    )
    add_pending(entry)
    url = claim_url(token)
    logger.info("token issued {} | client={} | route={} | expires_at={}", short(token), client, route, entry.expires_at)
    return IssuedToken(token=token, claim_url=url)
