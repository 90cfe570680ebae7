# backend/gunicorn_conf.py

# Gunicorn config file
import os

# Basic configuration
wsgi_app = "concierge.main:app"
bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"
workers = int(os.getenv("WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

# Chat turns wait on the LLM; keep the worker alive past the request deadline
timeout = 60
graceful_timeout = 30

# Settings for running behind a reverse proxy like Nginx
forwarded_allow_ips = "*"

# --- Logging ---
# Send access and error logs to stdout and stderr
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info")
