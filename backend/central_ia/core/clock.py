"""Wall-clock access for pipeline and alert evaluation.

Everything that needs "now" or "today" takes a ``Clock`` so tests can pin
the evaluation instant.
"""

from collections.abc import Callable
from datetime import datetime
from zoneinfo import ZoneInfo

from central_ia.core.config import settings

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Current time in the configured business timezone."""
    return datetime.now(ZoneInfo(settings.TIMEZONE))


def fixed_clock(instant: datetime) -> Clock:
    """Build a clock that always returns ``instant``.

    Naive datetimes are interpreted in the configured timezone.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=ZoneInfo(settings.TIMEZONE))

    def _now() -> datetime:
        return instant

    return _now
