"""
API routes for schedule generation, live rescheduling and validation.
"""

from datetime import datetime

from fastapi import APIRouter, HTTPException
from celery.result import AsyncResult

from tournament_scheduler.api.schemas import (
    ScheduleRequest, RescheduleRequest, ScheduleResponse,
    ValidateRequest, ValidationResponse
)
from tournament_scheduler.core.celery_app import celery_app
from tournament_scheduler.core.exceptions import ConfigurationError, FeasibilityError
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.services.scheduler import schedule_matches, reschedule_matches
from tournament_scheduler.services.validator import validate_schedule
from tournament_scheduler.tasks.scheduler_tasks import generate_schedule_task, reschedule_task

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["schedule"])


def _scheduling_http_error(error: Exception) -> HTTPException:
    if isinstance(error, ConfigurationError):
        return HTTPException(
            status_code=400,
            detail={"kind": error.kind.value, "message": str(error)}
        )
    if isinstance(error, FeasibilityError):
        return HTTPException(status_code=422, detail=error.to_dict())
    logger.exception("Unexpected scheduling failure")
    return HTTPException(status_code=500, detail=f"Schedule generation failed: {str(error)}")


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@router.post("/schedule", response_model=ScheduleResponse)
async def generate_schedule(request: ScheduleRequest):
    """
    Schedule every match of a tournament.

    This endpoint:
    1. Places the matches with the event-driven scheduler
    2. Validates the produced schedule
    3. Returns the schedule ordered by start time
    """
    try:
        start_time = datetime.now()
        matches, courts, config = request.to_domain()

        result = schedule_matches(matches, courts, config)
        validation = validate_schedule(result, matches, config)

        generation_time = (datetime.now() - start_time).total_seconds()
        return ScheduleResponse.from_result(result, validation, generation_time)

    except Exception as e:
        raise _scheduling_http_error(e)


@router.post("/reschedule", response_model=ScheduleResponse)
async def reschedule(request: RescheduleRequest):
    """
    Re-place the pending matches after some have been played.

    Completed matches are taken with their actual times; no pending match
    starts before `config.current_time`. Only pending matches are returned.
    """
    try:
        start_time = datetime.now()
        matches, courts, config = request.to_domain()

        result = reschedule_matches(matches, courts, config)
        validation = validate_schedule(result, matches, config, config.completed_matches)

        generation_time = (datetime.now() - start_time).total_seconds()
        return ScheduleResponse.from_result(
            result, validation, generation_time,
            message=f"Rescheduled {len(result)} pending matches"
        )

    except Exception as e:
        raise _scheduling_http_error(e)


@router.post("/validate", response_model=ValidationResponse)
async def validate(request: ValidateRequest):
    """Audit an existing schedule against the hard constraints."""
    validation = validate_schedule(
        [entry.to_domain() for entry in request.schedule],
        [match.to_domain() for match in request.matches],
        request.config.to_domain(),
        [completed.to_domain() for completed in request.completed_matches]
    )
    return ValidationResponse(valid=validation.is_valid, errors=validation.errors)


@router.post("/schedule/async")
async def generate_schedule_async(request: ScheduleRequest):
    """
    Start async schedule generation task.

    Returns:
        dict: Task ID for polling status
    """
    try:
        task = generate_schedule_task.delay(request.model_dump(mode="json"))

        return {
            "task_id": task.id,
            "status": "PENDING",
            "message": "Schedule generation started"
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to start task: {str(e)}")


@router.post("/reschedule/async")
async def reschedule_async(request: RescheduleRequest):
    """Start async reschedule task."""
    try:
        task = reschedule_task.delay(request.model_dump(mode="json"))

        return {
            "task_id": task.id,
            "status": "PENDING",
            "message": "Reschedule started"
        }
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to start task: {str(e)}")


@router.get("/schedule/status/{task_id}")
async def get_schedule_status(task_id: str):
    """
    Get status of an async scheduling task.

    Args:
        task_id: Celery task ID

    Returns:
        dict: Task status and result (if complete)
    """
    try:
        task_result = AsyncResult(task_id, app=celery_app)

        if task_result.state == "PENDING":
            response = {
                "task_id": task_id,
                "status": "PENDING",
                "message": "Task is waiting to start..."
            }
        elif task_result.state == "PROGRESS":
            response = {
                "task_id": task_id,
                "status": "PROGRESS",
                "message": (task_result.info or {}).get("status", "Processing...")
            }
        elif task_result.state == "SUCCESS":
            response = {
                "task_id": task_id,
                "status": "SUCCESS",
                "result": task_result.result
            }
        elif task_result.state == "FAILURE":
            response = {
                "task_id": task_id,
                "status": "FAILURE",
                "message": str(task_result.info)
            }
        else:
            response = {
                "task_id": task_id,
                "status": task_result.state,
                "message": f"Task state: {task_result.state}"
            }

        return response
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {str(e)}")
