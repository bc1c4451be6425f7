"""
Run Celery worker for async task processing.
"""

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tournament_scheduler.core.celery_app import celery_app
from tournament_scheduler.core.logging_config import setup_logging

if __name__ == "__main__":
    setup_logging()

    print("=" * 60)
    print("Tournament Match Scheduler - Celery Worker")
    print("=" * 60)
    print("Worker will process schedule and reschedule tasks")
    print("=" * 60)

    celery_app.worker_main([
        "worker",
        "--loglevel=info",
        "--concurrency=2",
        "--pool=solo" if os.name == "nt" else "--pool=prefork"  # No prefork on Windows
    ])
