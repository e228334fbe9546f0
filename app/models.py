from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
import time


def now_ms() -> int:
    return int(time.time() * 1000)


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class Product:
    name: str
    quantity: int

    def label(self) -> str:
        return f"{self.quantity} {self.name}"

    @classmethod
    def from_input(cls, item) -> 'Product | None':
        """Build from an admin-supplied item (``nombre``/``cantidad`` or ``name``/``quantity``)."""
        if not isinstance(item, dict):
            return None
        name = item.get('nombre', item.get('name'))
        qty = item.get('cantidad', item.get('quantity'))
        if name is None or not str(name).strip():
            return None
        if isinstance(qty, bool):
            return None
        if isinstance(qty, float) and not qty.is_integer():
            return None
        try:
            qty = int(qty)
        except (TypeError, ValueError):
            return None
        return cls(name=str(name).strip(), quantity=qty)

    def to_public(self) -> dict:
        return {'nombre': self.name, 'cantidad': self.quantity}


def products_summary(products: list[Product]) -> str:
    return ', '.join(p.label() for p in products)


def _products_from_store(raw) -> list[Product]:
    return [Product(name=p['name'], quantity=p['quantity']) for p in raw or []]


@dataclass
class PendingDelivery:
    token: str
    client: str
    route: str
    expires_at: int
    products: list[Product] = field(default_factory=list)
    id: int = field(default_factory=now_ms)
    confirmed: bool = False
    arrived_at: str | None = None

    def is_expired(self, now: int | None = None) -> bool:
        return (now if now is not None else now_ms()) >= self.expires_at

    def is_active(self, now: int | None = None) -> bool:
        return not self.confirmed and not self.is_expired(now)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> 'PendingDelivery':
        return cls(
            id=d.get('id') or 0,
            token=d['token'],
            client=d.get('client', ''),
            route=d.get('route', ''),
            products=_products_from_store(d.get('products')),
            expires_at=int(d['expires_at']),
            confirmed=bool(d.get('confirmed')),
            arrived_at=d.get('arrived_at'),
        )


@dataclass
class ConfirmedDelivery:
    client: str
    route: str
    arrived_at: str
    products: list[Product] = field(default_factory=list)
    recorded_at: str = field(default_factory=iso_now)

    @property
    def summary(self) -> str:
        return products_summary(self.products)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_public(self) -> dict:
        return {
            'cliente': self.client,
            'ruta': self.route,
            'productos': [p.to_public() for p in self.products],
            'llegada': self.arrived_at,
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'ConfirmedDelivery':
        return cls(
            client=d.get('client', ''),
            route=d.get('route', ''),
            arrived_at=d.get('arrived_at', ''),
            products=_products_from_store(d.get('products')),
            recorded_at=d.get('recorded_at', ''),
        )

    @classmethod
    def from_pending(cls, pending: PendingDelivery) -> 'ConfirmedDelivery':
        return cls(
            client=pending.client,
            route=pending.route,
            arrived_at=pending.arrived_at,
            products=list(pending.products),
        )
