import multiprocessing
import os

# Sensible defaults for a small dyno/container; tune as needed.
# More than one worker needs USE_REDIS: the in-memory store is per process.
workers = int(os.environ.get('WEB_CONCURRENCY', (multiprocessing.cpu_count() * 2) + 1))
threads = 2
worker_class = "gthread"
preload_app = True
bind = f":{os.environ.get('PORT', '3000')}"
wsgi_app = "app:create_app()"
# Heroku/Render style proxy headers
forwarded_allow_ips = "*"
# PDF rendering launches Chromium; allow for a cold start
timeout = 90
keepalive = 75
# Access logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
