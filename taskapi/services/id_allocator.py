"""
Daily sequential task ids.

Ids look like ``YYMMDDnnn``: the creation date in the allocator's time zone
followed by a zero-padded sequence starting at ``001``. The next id is
derived from the greatest id already stored under today's prefix, so two
overlapping calls can produce the same id. Callers must insert with
create-if-absent semantics and allocate again on ``TaskIdConflictError``
(see ``TaskService.create``).
"""
import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Callable
from zoneinfo import ZoneInfo

from ..errors import TaskIdAllocationError
from ..models.task_repository import TaskRepository

logger = logging.getLogger(__name__)

SEQUENCE_DIGITS = 3
MAX_SEQUENCE = 10 ** SEQUENCE_DIGITS - 1


def resolve_timezone(name: str) -> tzinfo:
    """Time zone for a configured name; UTC does not need the tz database"""
    if not name or name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(name)


class DailySequentialIdAllocator:

    def __init__(self, repository: TaskRepository, tz: tzinfo = timezone.utc,
                 clock: Callable[[], datetime] = None):
        self.repository = repository
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def today(self) -> date:
        """Current calendar date in the allocator's time zone"""
        return self._clock().astimezone(self.tz).date()

    @staticmethod
    def prefix_for(day: date) -> str:
        return day.strftime("%y%m%d")

    @staticmethod
    def _sequence_of(task_id: str, prefix: str) -> int:
        suffix = task_id[len(prefix):]
        if len(suffix) != SEQUENCE_DIGITS or not suffix.isdigit():
            raise TaskIdAllocationError(f"Malformed task id under prefix {prefix}: {task_id}")
        return int(suffix)

    async def next_id(self, today: date = None, after: str = None) -> str:
        """
        Compute the next unused-looking id for ``today``.

        ``after`` is an id known to be taken (a lost insert); the result is
        always greater than it when it shares today's prefix, even if the
        stored maximum has not caught up yet.
        """
        prefix = self.prefix_for(today or self.today())
        latest = await self.repository.find_max_id_with_prefix(prefix)
        sequence = self._sequence_of(latest.id, prefix) if latest is not None else 0
        if after and after.startswith(prefix):
            sequence = max(sequence, self._sequence_of(after, prefix))

        sequence += 1
        if sequence > MAX_SEQUENCE:
            raise TaskIdAllocationError(f"Daily task id sequence exhausted for {prefix}")

        next_id = f"{prefix}{sequence:0{SEQUENCE_DIGITS}d}"
        logger.debug(f"Allocated task id {next_id}")
        return next_id
