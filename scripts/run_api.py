"""
Run the FastAPI backend server.
"""

import os
import sys

import uvicorn

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tournament_scheduler.core.config import API_HOST, API_PORT
from tournament_scheduler.core.logging_config import setup_logging


if __name__ == "__main__":
    setup_logging()

    print("=" * 60)
    print("Tournament Match Scheduler API Server")
    print("=" * 60)
    print(f"Starting server on http://{API_HOST}:{API_PORT}")
    print(f"API Documentation: http://{API_HOST}:{API_PORT}/docs")
    print("=" * 60)

    uvicorn.run(
        "tournament_scheduler.main:app",
        host=API_HOST,
        port=API_PORT,
        reload="--reload" in sys.argv,
        log_level="info"
    )
