"""Time-of-day advisory for submitting NDR actions.

The courier processes re-attempt requests against shipments that have
returned to the origin facility, so requests sent before the evening cutoff
may be dropped for AWBs still out for delivery. The advisor only reports
whether now is a good time; it never blocks a submission.
"""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from ndrdesk.services.nsl_policy import DEFAULT_MAX_PRIOR_ATTEMPTS

DEFAULT_CUTOFF_HOUR = 21


def _format_hour(hour: int) -> str:
    """Format a 24h hour as '9 PM' style text."""
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display} {suffix}"


class TimeWindowAdvisor:
    """Recommend deferring NDR actions until after the cutoff hour."""

    def __init__(self, cutoff_hour: int = DEFAULT_CUTOFF_HOUR, timezone: str | None = None) -> None:
        if not 0 <= cutoff_hour <= 23:
            raise ValueError(f"cutoff_hour must be between 0 and 23, got {cutoff_hour}")
        self._cutoff_hour = cutoff_hour
        self._tz = ZoneInfo(timezone) if timezone else None

    @property
    def cutoff_hour(self) -> int:
        """Return the local hour after which actions are recommended."""
        return self._cutoff_hour

    def _local(self, now: datetime | None) -> datetime:
        if now is None:
            now = datetime.now(self._tz) if self._tz else datetime.now()
        elif self._tz is not None and now.tzinfo is not None:
            now = now.astimezone(self._tz)
        return now

    def is_recommended_time(self, now: datetime | None = None) -> bool:
        """Return True at or after the cutoff hour, local time."""
        return self._local(now).hour >= self._cutoff_hour

    def recommendation_message(self, now: datetime | None = None) -> str:
        """Return banner text describing whether now is a good time."""
        local = self._local(now)
        cutoff = _format_hour(self._cutoff_hour)
        if local.hour < self._cutoff_hour:
            return (
                f"Current time: {local.hour}:00. Recommended to apply NDR "
                f"actions after {cutoff} for better results."
            )
        return f"Good time to apply NDR actions (after {cutoff})."


def next_attempt_date(
    attempt_count: int,
    today: date | None = None,
    max_prior_attempts: int = DEFAULT_MAX_PRIOR_ATTEMPTS,
) -> date | None:
    """Return the expected date of the next delivery attempt.

    Args:
        attempt_count: Attempts recorded before the re-attempt request.
        today: Reference date; defaults to the current local date.
        max_prior_attempts: Attempt ceiling of the policy in effect.

    Returns:
        The following day while attempts remain, otherwise None.
    """
    if attempt_count > max_prior_attempts:
        return None
    return (today or date.today()) + timedelta(days=1)
