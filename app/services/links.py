from urllib.parse import urlencode
from flask import current_app, request


def base_url() -> str:
    """Externally visible origin for links handed to recipients.

    ProxyFix has already applied X-Forwarded-Proto/Host to ``request``.
    """
    host = current_app.config.get('PUBLIC_HOST')
    if host:
        return f"https://{host}"
    configured = current_app.config.get('BASE_URL')
    if configured:
        return configured.rstrip('/')
    return request.host_url.rstrip('/')


def claim_url(token: str) -> str:
    return f"{base_url()}/client?{urlencode({'token': token})}"


def confirm_url(token: str, sub_token: str, timestamp: int) -> str:
    query = urlencode({'token': token, 'subToken': sub_token, 'timestamp': timestamp})
    return f"{base_url()}/confirmar?{query}"
