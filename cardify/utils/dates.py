"""
Calendar helpers shared by the scheduler and the study views.

All functions take the reference instant explicitly; nothing here reads the
system clock.
"""
from datetime import datetime, timedelta, timezone


def ensure_aware(moment: datetime) -> datetime:
    """Read a naive ``moment`` as UTC; aware values pass through unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def add_days(moment: datetime, days: int) -> datetime:
    """Return ``moment`` moved by ``days`` calendar days.

    Arithmetic on an aware datetime keeps the wall-clock time and recomputes
    the UTC offset for the target day, so with a ``zoneinfo`` timezone a card
    reviewed at 09:00 is due at 09:00 even across a daylight-saving change.
    """
    return moment + timedelta(days=days)


def format_date(moment: datetime) -> str:
    return moment.strftime('%d/%m/%Y')


def format_relative_date(moment: datetime, now: datetime) -> str:
    """Human label for ``moment`` relative to ``now`` at day granularity.

    Returns 'today', 'yesterday', 'tomorrow', 'in N days' / 'N days ago' within
    a week, and a dd/mm/yyyy date beyond that.
    """
    if moment.tzinfo is not None and now.tzinfo is not None:
        moment = moment.astimezone(now.tzinfo)
    diff_days = (now.date() - moment.date()).days

    if diff_days < 0:
        if diff_days == -1:
            return 'tomorrow'
        if diff_days > -7:
            return f'in {abs(diff_days)} days'
        return format_date(moment)
    if diff_days == 0:
        return 'today'
    if diff_days == 1:
        return 'yesterday'
    if diff_days < 7:
        return f'{diff_days} days ago'
    return format_date(moment)
