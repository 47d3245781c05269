import os

from sessionauth.core.config import ServerConfig

_server = ServerConfig.from_env()

# App
wsgi_app = "sessionauth:create_app()"

# Bind & workers
bind = f"0.0.0.0:{_server.port}"
workers = _server.workers  # override with env GUNICORN_WORKERS
threads = 1
timeout = _server.handler_timeout  # HANDLER_TIMEOUT
graceful_timeout = _server.graceful_timeout  # GRACEFUL_TIMEOUT, 5 s by default
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Trust proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
