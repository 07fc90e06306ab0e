"""
Production Server Configuration

Run the API with Uvicorn workers under Gunicorn. Each worker owns its own
event loop and database pool.
"""

import multiprocessing
import os

# Server socket
bind = os.getenv("BIND", "0.0.0.0:5000")
backlog = 2048

# Worker processes
workers = int(os.getenv("WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
max_requests = 10000
max_requests_jitter = 1000
timeout = 60
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "syntera-crm-api"

# Logging goes through structlog once the app starts; these cover the master
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
accesslog = None
