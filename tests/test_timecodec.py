"""Tests for timestamp and recurrence conversion."""

from datetime import date, datetime, timedelta, timezone

import pytest
from icalendar.prop import vRecur

from infrastructure.timecodec import (
    from_caldav_rrule, from_caldav_time, is_zero_time, to_caldav_rrule, to_caldav_time
)


class TestZeroTime:

    @pytest.mark.parametrize('value', [
        None,
        datetime(1, 1, 1),
        datetime(1, 1, 1, tzinfo=timezone.utc),
        datetime(1970, 1, 1, tzinfo=timezone.utc),
        datetime(1970, 1, 1),
    ])
    def test_unset_values(self, value):
        assert is_zero_time(value)

    def test_real_value(self):
        assert not is_zero_time(datetime(2018, 12, 1, tzinfo=timezone.utc))


class TestToCaldavTime:

    def test_converts_to_utc_and_drops_microseconds(self):
        value = datetime(2018, 12, 1, 2, 12, 5, 654321, tzinfo=timezone(timedelta(hours=1)))

        assert to_caldav_time(value) == datetime(2018, 12, 1, 1, 12, 5, tzinfo=timezone.utc)

    def test_naive_is_taken_as_utc(self):
        assert to_caldav_time(datetime(2018, 12, 1, 1, 12, 5)) == \
            datetime(2018, 12, 1, 1, 12, 5, tzinfo=timezone.utc)

    def test_unset(self):
        assert to_caldav_time(None) is None
        assert to_caldav_time(datetime(1, 1, 1)) is None


class TestFromCaldavTime:

    def test_naive_is_read_in_configured_zone(self, berlin):
        assert from_caldav_time(datetime(2018, 12, 1, 1, 12, 4), berlin) == \
            datetime(2018, 12, 1, 1, 12, 4, tzinfo=berlin)

    def test_aware_is_converted(self, berlin):
        got = from_caldav_time(datetime(2018, 12, 1, 1, 12, 4, tzinfo=timezone.utc), berlin)

        assert got == datetime(2018, 12, 1, 2, 12, 4, tzinfo=berlin)
        assert got.tzinfo is berlin

    def test_date_becomes_midnight(self, berlin):
        assert from_caldav_time(date(2018, 12, 24), berlin) == datetime(2018, 12, 24, tzinfo=berlin)

    def test_sentinel_and_junk(self, utc):
        assert from_caldav_time(datetime(1, 1, 1), utc) is None
        assert from_caldav_time(None, utc) is None
        assert from_caldav_time('not a date', utc) is None
        assert from_caldav_time([], utc) is None


class TestRecurrence:

    def test_to_rrule(self):
        assert to_caldav_rrule(86400) == {'FREQ': 'SECONDLY', 'INTERVAL': 86400}

    def test_no_recurrence(self):
        assert to_caldav_rrule(0) is None
        assert to_caldav_rrule(-5) is None

    def test_rrule_value_is_formatted_for_calendars(self):
        assert vRecur(to_caldav_rrule(86400)).to_ical() == b'FREQ=SECONDLY;INTERVAL=86400'

    @pytest.mark.parametrize('rule, seconds', [
        ('FREQ=SECONDLY;INTERVAL=86400', 86400),
        ('FREQ=SECONDLY;INTERVAL=3600', 3600),
        ('FREQ=SECONDLY', 1),
        ('FREQ=DAILY;INTERVAL=1', 0),
        ('FREQ=MONTHLY;BYMONTHDAY=1', 0),
        ('FREQ=SECONDLY;INTERVAL=60;COUNT=3', 0),
        ('FREQ=WEEKLY;BYDAY=MO,WE;UNTIL=20190101T000000Z', 0),
    ])
    def test_from_rrule(self, rule, seconds):
        assert from_caldav_rrule(vRecur.from_ical(rule)) == seconds

    def test_from_missing_rrule(self):
        assert from_caldav_rrule(None) == 0

    def test_several_rules_are_ignored(self):
        rules = [vRecur.from_ical('FREQ=SECONDLY;INTERVAL=60'), vRecur.from_ical('FREQ=SECONDLY;INTERVAL=30')]
        assert from_caldav_rrule(rules) == 0

    def test_unparsed_rule_is_ignored(self):
        assert from_caldav_rrule('FREQ=SECONDLY;INTERVAL=60') == 0
