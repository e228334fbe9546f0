import os


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() not in ('0', 'false', 'no', '')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev')
    REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
    USE_REDIS = _flag('USE_REDIS', '1')
    # Explicit public URL; wins over the request host when set
    BASE_URL = os.environ.get('BASE_URL')
    # Known deployment hostname (served over https)
    PUBLIC_HOST = os.environ.get('PUBLIC_HOST')
    TOKEN_TTL_HOURS = int(os.environ.get('TOKEN_TTL_HOURS', '24'))
    REPORT_TIMEZONE = os.environ.get('REPORT_TIMEZONE', 'America/Bogota')
    LOCK_TIMEOUT = float(os.environ.get('LOCK_TIMEOUT', '10'))
    LOCK_BLOCKING_TIMEOUT = float(os.environ.get('LOCK_BLOCKING_TIMEOUT', '5'))
    CHROMIUM_EXECUTABLE = os.environ.get('CHROMIUM_EXECUTABLE')
    PDF_RENDER_TIMEOUT_MS = int(os.environ.get('PDF_RENDER_TIMEOUT_MS', '30000'))
    AUDIT_LOG_PATH = os.environ.get('AUDIT_LOG_PATH')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    DEBUG_ROUTES = _flag('DEBUG_ROUTES', '0')

    def __init__(self):
        # Optional fallback to support Secret Files on Render (/etc/secrets)
        if (not self.SECRET_KEY) or self.SECRET_KEY == 'dev':
            try:
                with open('/etc/secrets/secret_key', 'r') as f:
                    self.SECRET_KEY = f.read().strip()
            except OSError:
                pass
        if not os.environ.get('REDIS_URL'):
            try:
                with open('/etc/secrets/redis_url', 'r') as f:
                    self.REDIS_URL = f.read().strip()
            except OSError:
                pass
