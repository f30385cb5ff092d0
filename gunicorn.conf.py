"""Gunicorn config for container deployment."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Session state lives in process memory, so each worker holds its own session.
# Keep a single worker unless sessions are pinned to workers upstream.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

# Large workbook uploads/exports
timeout = 120
graceful_timeout = 30
keepalive = 65

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("BILLSIGHT_LOG_LEVEL", "info").lower()

wsgi_app = "billsight.main:app"
