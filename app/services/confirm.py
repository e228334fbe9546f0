from dataclasses import dataclass
from loguru import logger
from .deliveries import claim, short
from .tokens import sub_token_valid
from ..errors import DeliveryNotFound
from ..models import iso_now, products_summary

MSG_TOKEN_REQUIRED = 'Token required'
MSG_SUB_INVALID = 'Sub-token invalid or expired'
MSG_NOT_ACTIVE = 'Token expired or already used'


@dataclass
class ConfirmResult:
    ok: bool
    msg: str

    def to_dict(self) -> dict:
        return {'ok': self.ok, 'msg': self.msg}


def confirm(main_token, sub_token, timestamp) -> ConfirmResult:
    if not isinstance(main_token, str) or not main_token.strip() or main_token == 'undefined':
        logger.info("confirm rejected: empty main token")
        return ConfirmResult(False, MSG_TOKEN_REQUIRED)

    if not sub_token_valid(main_token, sub_token, timestamp):
        logger.info("confirm rejected: bad or stale sub-token for {} (timestamp={})", short(main_token), timestamp)
        return ConfirmResult(False, MSG_SUB_INVALID)

    try:
        delivery = claim(main_token, iso_now())
    except DeliveryNotFound as e:
        logger.info("confirm rejected: {} is {}", short(main_token), e.reason)
        return ConfirmResult(False, MSG_NOT_ACTIVE)

    logger.info("delivery confirmed {} | client={} | route={}", short(main_token), delivery.client, delivery.route)
    return ConfirmResult(
        True,
        f"Delivery confirmed for {delivery.client} on route {delivery.route}! "
        f"Products: {products_summary(delivery.products)}",
    )
