from datetime import date, datetime, timezone

import pytest

from taskapi.utils.validators import Helpers, Validators


def valid_candidate(**overrides):
    candidate = {
        "id": "240305001",
        "title": "T",
        "description": "D",
        "status": "pending",
        "dueDate": "2024-03-10T12:00:00Z",
        "assigneeIds": ["u1"],
    }
    candidate.update(overrides)
    return candidate


class TestValidateTask:

    def test_fully_populated_candidate_is_valid(self):
        assert Validators.validate_task(valid_candidate()) is True

    @pytest.mark.parametrize("field, value", [
        ("title", ""),
        ("title", "   "),
        ("description", ""),
        ("description", "\t"),
        ("dueDate", "not-a-date"),
        ("dueDate", None),
        ("assigneeIds", []),
        ("assigneeIds", "u1"),
        ("assigneeIds", [1, 2]),
        ("id", ""),
        ("id", "  "),
        ("status", None),
    ])
    def test_single_failing_field_invalidates(self, field, value):
        assert Validators.validate_task(valid_candidate(**{field: value})) is False

    def test_missing_fields_are_invalid(self):
        candidate = valid_candidate()
        del candidate["title"]
        assert Validators.validate_task(candidate) is False

    def test_unknown_status_is_accepted(self):
        assert Validators.validate_task(valid_candidate(status="waiting-on-vendor")) is True

    def test_datetime_due_date_is_accepted(self):
        due = datetime(2024, 3, 10, tzinfo=timezone.utc)
        assert Validators.validate_task(valid_candidate(dueDate=due)) is True

    def test_non_dict_is_invalid(self):
        assert Validators.validate_task(None) is False
        assert Validators.validate_task(["id"]) is False


class TestValidateTaskFields:

    def test_accepts_fields_without_id(self):
        fields = valid_candidate()
        del fields["id"]
        assert Validators.validate_task_fields(fields) is True
        assert Validators.validate_task(fields) is False

    def test_rejects_blank_title(self):
        assert Validators.validate_task_fields(valid_candidate(title="  ")) is False

    def test_rejects_non_dict(self):
        assert Validators.validate_task_fields(None) is False


class TestTimestamps:

    def test_parse_z_suffix(self):
        assert Helpers.parse_timestamp("2024-03-10T12:00:00Z") == datetime(2024, 3, 10, 12, tzinfo=timezone.utc)

    def test_parse_date_only_string(self):
        assert Helpers.parse_timestamp("2024-03-10") == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_parse_date_object(self):
        assert Helpers.parse_timestamp(date(2024, 3, 10)) == datetime(2024, 3, 10, tzinfo=timezone.utc)

    def test_parse_garbage(self):
        assert Helpers.parse_timestamp("not-a-date") is None
        assert Helpers.parse_timestamp(12345) is None

    def test_format_aware_timestamp(self):
        assert Helpers.format_timestamp(datetime(2024, 3, 10, 12, tzinfo=timezone.utc)) == "2024-03-10T12:00:00Z"

    def test_format_naive_timestamp(self):
        assert Helpers.format_timestamp(datetime(2024, 3, 10, 12)) == "2024-03-10T12:00:00Z"

    def test_error_response_shape(self):
        body = Helpers.build_error_response("Task not found", "NOT_FOUND")
        assert body["message"] == "Task not found"
        assert body["code"] == "NOT_FOUND"
        assert body["timestamp"].endswith("Z")
