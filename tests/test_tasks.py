"""
Tests for the Celery task bodies, executed in-process without a worker.
"""

import pytest

from tournament_scheduler.tasks.scheduler_tasks import generate_schedule_task, reschedule_task


@pytest.fixture
def payload():
    return {
        "matches": [
            {"id": "M1", "team1": "A", "team2": "B"},
            {"id": "M2", "team1": "C", "team2": "D"},
            {"id": "M3", "team1": "A", "team2": "C", "round": 2, "dependencies": ["M1", "M2"]},
        ],
        "courts": [{"id": "C1"}],
        "config": {"rest_time": 10, "start_time": "2025-06-14T09:00:00"},
    }


def test_generate_schedule_task_returns_json_result(payload):
    result = generate_schedule_task(payload)

    assert result["success"] is True
    assert result["total_matches"] == 3
    assert [entry["match_id"] for entry in result["schedule"]] == ["M1", "M2", "M3"]
    assert result["schedule"][2]["start_time"] == "2025-06-14T10:10:00"
    assert result["validation"]["is_valid"] is True


def test_generate_schedule_task_reports_feasibility_failure(payload):
    payload["matches"][0]["dependencies"] = ["M3"]

    result = generate_schedule_task(payload)

    assert result["success"] is False
    assert result["kind"] == "feasibility"
    assert result["cause"] == "circular_dependency"


def test_generate_schedule_task_reports_bad_payload():
    result = generate_schedule_task({"courts": []})

    assert result["success"] is False
    assert "Schedule generation failed" in result["message"]


def test_reschedule_task(payload):
    payload["config"].update({
        "current_time": "2025-06-14T09:40:00",
        "completed_matches": [
            {
                "match_id": "M1", "court_id": "C1",
                "actual_start_time": "2025-06-14T09:00:00", "actual_end_time": "2025-06-14T09:35:00",
                "team1_id": "A", "team2_id": "B"
            }
        ],
    })

    result = reschedule_task(payload)

    assert result["success"] is True
    assert [entry["match_id"] for entry in result["schedule"]] == ["M2", "M3"]
    assert result["schedule"][0]["start_time"] == "2025-06-14T09:40:00"
    assert result["schedule"][1]["start_time"] == "2025-06-14T10:20:00"


def test_reschedule_task_reports_configuration_error(payload):
    result = reschedule_task(payload)

    assert result["success"] is False
    assert result["kind"] == "configuration"
