"""
Celery tasks for schedule generation and live rescheduling.
"""

from datetime import datetime
import traceback

from pydantic import ValidationError

from tournament_scheduler.core.celery_app import celery_app
from tournament_scheduler.core.exceptions import SchedulingError, FeasibilityError
from tournament_scheduler.core.logging_config import get_logger
from tournament_scheduler.api.schemas import ScheduleRequest, RescheduleRequest, ScheduleResponse
from tournament_scheduler.services.scheduler import schedule_matches, reschedule_matches
from tournament_scheduler.services.validator import validate_schedule

logger = get_logger(__name__)


def _report(task, status: str):
    # Progress states only exist when a worker runs the task
    if not task.request.called_directly:
        task.update_state(state="PROGRESS", meta={"status": status})


def _failure(message: str, error: Exception) -> dict:
    failure = {
        "success": False,
        "message": f"{message}: {error}",
        "error": str(error)
    }
    if isinstance(error, SchedulingError):
        failure["kind"] = error.kind.value
    if isinstance(error, FeasibilityError):
        failure.update(cause=error.cause.value, placed=error.placed, total=error.total, unplaced=error.unplaced)
    return failure


@celery_app.task(bind=True, name="generate_schedule")
def generate_schedule_task(self, payload: dict):
    """
    Async task to schedule a tournament.

    Args:
        payload: Same body as POST /api/schedule

    Returns:
        dict: Schedule data with summary and validation results
    """
    try:
        _report(self, "Reading matches and courts...")
        start_time = datetime.now()

        request = ScheduleRequest.model_validate(payload)
        matches, courts, config = request.to_domain()

        _report(self, f"Scheduling {len(matches)} matches on {len(courts)} courts...")
        result = schedule_matches(matches, courts, config)

        _report(self, "Validating schedule...")
        validation = validate_schedule(result, matches, config)

        generation_time = (datetime.now() - start_time).total_seconds()
        response = ScheduleResponse.from_result(result, validation, generation_time)
        return response.model_dump(mode="json")

    except (SchedulingError, ValidationError) as e:
        logger.warning("Schedule generation failed: %s", e)
        return _failure("Schedule generation failed", e)
    except Exception as e:
        logger.error("Error in generate_schedule_task: %s", traceback.format_exc())
        failure = _failure("Schedule generation failed", e)
        failure["traceback"] = traceback.format_exc()
        return failure


@celery_app.task(bind=True, name="reschedule")
def reschedule_task(self, payload: dict):
    """
    Async task to re-plan the pending matches of a running tournament.

    Args:
        payload: Same body as POST /api/reschedule

    Returns:
        dict: Schedule of the pending matches with summary and validation results
    """
    try:
        _report(self, "Painting completed matches...")
        start_time = datetime.now()

        request = RescheduleRequest.model_validate(payload)
        matches, courts, config = request.to_domain()

        _report(self, f"Rescheduling {len(matches) - len(config.completed_matches)} pending matches...")
        result = reschedule_matches(matches, courts, config)

        _report(self, "Validating schedule...")
        validation = validate_schedule(result, matches, config, config.completed_matches)

        generation_time = (datetime.now() - start_time).total_seconds()
        response = ScheduleResponse.from_result(
            result, validation, generation_time,
            message=f"Rescheduled {len(result)} pending matches"
        )
        return response.model_dump(mode="json")

    except (SchedulingError, ValidationError) as e:
        logger.warning("Reschedule failed: %s", e)
        return _failure("Reschedule failed", e)
    except Exception as e:
        logger.error("Error in reschedule_task: %s", traceback.format_exc())
        failure = _failure("Reschedule failed", e)
        failure["traceback"] = traceback.format_exc()
        return failure
