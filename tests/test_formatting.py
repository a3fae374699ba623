from datetime import date, datetime, timedelta, timezone

import pytest

from jugsite.services.formatting import (
    format_ics_datetime,
    format_rfc822,
    format_rfc822_date,
)


def test_ics_datetime_converts_to_utc():
    value = datetime(2016, 7, 7, 19, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_ics_datetime(value) == "20160707T170000Z"


def test_ics_datetime_rejects_naive_values():
    with pytest.raises(ValueError):
        format_ics_datetime(datetime(2016, 7, 7, 19, 0))


def test_rfc822_uses_english_names_and_gmt():
    value = datetime(2016, 8, 5, 14, 3, 9, tzinfo=timezone(timedelta(hours=2)))
    assert format_rfc822(value) == "Fri, 05 Aug 2016 12:03:09 GMT"


def test_rfc822_date_is_midnight():
    assert format_rfc822_date(date(2016, 8, 4)) == "Thu, 04 Aug 2016 00:00:00 GMT"
