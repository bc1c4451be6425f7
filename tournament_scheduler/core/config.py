"""
Configuration constants for the Tournament Match Scheduler.
All configurable settings are defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

API_VERSION = "1.0.0"

# Scheduling defaults (used by the HTTP API and CLI when a request omits them)
DEFAULT_REST_TIME_MINUTES = float(os.getenv("SCHEDULER_DEFAULT_REST_MINUTES", "15"))
DEFAULT_COURT_SETUP_MINUTES = float(os.getenv("SCHEDULER_DEFAULT_COURT_SETUP_MINUTES", "0"))
DEFAULT_MATCH_ROUND = 1

# Logging
LOG_LEVEL = os.getenv("SCHEDULER_LOG_LEVEL", "INFO").upper()

# API server
API_HOST = os.getenv("SCHEDULER_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("SCHEDULER_API_PORT", "8000"))

# Comma separated list of allowed frontend origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("SCHEDULER_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

# Celery / Redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CELERY_TIMEZONE = os.getenv("CELERY_TIMEZONE", "UTC")
TASK_TIME_LIMIT_SECONDS = int(os.getenv("SCHEDULER_TASK_TIME_LIMIT", "600"))  # 10 minutes max
TASK_SOFT_TIME_LIMIT_SECONDS = int(os.getenv("SCHEDULER_TASK_SOFT_TIME_LIMIT", "540"))
