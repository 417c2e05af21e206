from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cardify.utils.dates import add_days, format_date, format_relative_date

NOW = datetime(2024, 5, 15, 18, 0, tzinfo=timezone.utc)


def test_format_date():
    assert format_date(datetime(2024, 3, 4, 9, 30)) == '04/03/2024'


@pytest.mark.parametrize('offset_days,label', [
    (0, 'today'),
    (1, 'tomorrow'),
    (-1, 'yesterday'),
    (3, 'in 3 days'),
    (6, 'in 6 days'),
    (-2, '2 days ago'),
    (-6, '6 days ago'),
    (7, '22/05/2024'),
    (-7, '08/05/2024'),
])
def test_format_relative_date(offset_days, label):
    assert format_relative_date(add_days(NOW, offset_days), NOW) == label


def test_relative_date_uses_calendar_days_not_hours():
    # 7 hours ahead crosses midnight
    assert format_relative_date(NOW + timedelta(hours=7), NOW) == 'tomorrow'
    assert format_relative_date(NOW - timedelta(hours=17), NOW) == 'today'


def test_relative_date_in_reference_timezone():
    paris = ZoneInfo('Europe/Paris')
    now = datetime(2024, 5, 15, 23, 30, tzinfo=paris)
    # 22:00 UTC is already midnight the next day in Paris
    moment = datetime(2024, 5, 15, 22, 0, tzinfo=timezone.utc)
    assert format_relative_date(moment, now) == 'tomorrow'


def test_relative_date_prints_day_seen_from_reference_timezone():
    paris = ZoneInfo('Europe/Paris')
    now = datetime(2024, 5, 15, 10, 0, tzinfo=paris)
    # 22:30 UTC on the 22nd is 00:30 on the 23rd in Paris
    moment = datetime(2024, 5, 22, 22, 30, tzinfo=timezone.utc)
    assert format_relative_date(moment, now) == '23/05/2024'
