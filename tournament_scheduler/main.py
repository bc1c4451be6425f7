"""
Main FastAPI application for the Tournament Match Scheduler.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tournament_scheduler.api import routes
from tournament_scheduler.core.config import API_VERSION, CORS_ORIGINS

app = FastAPI(
    title="Tournament Match Scheduler API",
    description="API for scheduling and live-rescheduling tournament matches on courts",
    version=API_VERSION
)

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(routes.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Tournament Match Scheduler API",
        "version": API_VERSION,
        "endpoints": {
            "schedule": "/api/schedule",
            "reschedule": "/api/reschedule",
            "validate": "/api/validate",
            "schedule_async": "/api/schedule/async",
            "status": "/api/schedule/status/{task_id}",
            "health": "/api/health"
        }
    }
