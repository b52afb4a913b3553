from datetime import date, datetime, timezone
from typing import Dict, Any, Optional


class Validators:
    """Input validation utilities for task payloads"""

    @staticmethod
    def validate_non_blank(value: Any) -> bool:
        """Validate a required text field (string with at least one non-space char)"""
        return isinstance(value, str) and value.strip() != ""

    @staticmethod
    def validate_status(status: Any) -> bool:
        """Status is an opaque tag; only its presence is checked"""
        return status is not None

    @staticmethod
    def validate_due_date(due_date: Any) -> bool:
        """Validate that the due date parses to a date/time"""
        return Helpers.parse_timestamp(due_date) is not None

    @staticmethod
    def validate_assignee_ids(assignee_ids: Any) -> bool:
        """Validate assignee list (non-empty list of user id strings)"""
        if not isinstance(assignee_ids, (list, tuple)) or not assignee_ids:
            return False
        return all(Validators.validate_non_blank(uid) for uid in assignee_ids)

    @staticmethod
    def validate_task(candidate: Dict[str, Any]) -> bool:
        """
        Check a candidate task document before it is persisted.

        Expects the document shape produced by ``Task.to_dict`` (``id``,
        ``title``, ``description``, ``status``, ``dueDate``, ``assigneeIds``).
        Never raises; any failing condition makes the whole candidate invalid.
        """
        return (
            isinstance(candidate, dict)
            and Validators.validate_non_blank(candidate.get("id"))
            and Validators.validate_task_fields(candidate)
        )

    @staticmethod
    def validate_task_fields(fields: Dict[str, Any]) -> bool:
        """Check every task field except ``id`` (used before an id is allocated)"""
        if not isinstance(fields, dict):
            return False
        return (
            Validators.validate_non_blank(fields.get("title"))
            and Validators.validate_non_blank(fields.get("description"))
            and Validators.validate_status(fields.get("status"))
            and Validators.validate_due_date(fields.get("dueDate"))
            and Validators.validate_assignee_ids(fields.get("assigneeIds"))
        )


class Helpers:
    """Utility helper functions"""

    @staticmethod
    def get_current_timestamp() -> datetime:
        """Get current timestamp (UTC, timezone-aware)"""
        return datetime.now(timezone.utc)

    @staticmethod
    def format_timestamp(timestamp: datetime) -> str:
        """Format timestamp for API response"""
        if timestamp.tzinfo is None:
            return timestamp.isoformat() + 'Z'
        return timestamp.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def parse_timestamp(value: Any) -> Optional[datetime]:
        """Parse an ISO-8601 string, date or datetime; naive values are taken as UTC"""
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith('Z'):
                text = text[:-1] + '+00:00'
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                return None
        else:
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @staticmethod
    def sanitize_string(text: Any) -> Any:
        """Strip surrounding whitespace from string input; other values pass through"""
        if isinstance(text, str):
            return text.strip()
        return text

    @staticmethod
    def build_error_response(message: str, code: str = "BAD_REQUEST") -> Dict[str, Any]:
        """Build standardized error response"""
        return {
            'message': message,
            'code': code,
            'timestamp': Helpers.format_timestamp(Helpers.get_current_timestamp())
        }
