"""Tests for the solar-to-lunar calendar resolver."""

from datetime import date, datetime, timedelta

import pytest

from deskhive.core import lunar_data
from deskhive.core.calendar import CalendarResolver, LunarDate, to_lunar, weekday_index
from deskhive.core.errors import OutOfRange


@pytest.fixture
def resolver():
    return CalendarResolver()


@pytest.fixture
def zh_resolver():
    return CalendarResolver(locale="zh")


class TestLunarTable:
    def test_covers_1900_to_2100(self):
        assert len(lunar_data.LUNAR_INFO) == lunar_data.LAST_YEAR - lunar_data.FIRST_YEAR + 1

    def test_year_lengths_plausible(self):
        for year in range(lunar_data.FIRST_YEAR, lunar_data.LAST_YEAR + 1):
            days = lunar_data.year_days(year)
            if lunar_data.leap_month(year):
                assert 383 <= days <= 385, year
            else:
                assert 353 <= days <= 355, year

    def test_known_leap_months(self):
        assert lunar_data.leap_month(2020) == 4
        assert lunar_data.leap_month(2023) == 2
        assert lunar_data.leap_month(2025) == 6
        assert lunar_data.leap_month(2033) == 11
        assert lunar_data.leap_month(2024) == 0


class TestToLunar:
    @pytest.mark.parametrize(
        "solar",
        [
            date(1900, 1, 31),
            date(2000, 2, 5),
            date(2023, 1, 22),
            date(2024, 2, 10),
            date(2025, 1, 29),
            date(2033, 1, 31),
        ],
    )
    def test_lunar_new_year(self, solar):
        assert to_lunar(solar) == LunarDate(solar.year, 1, 1)

    def test_new_years_eve_is_last_month(self):
        eve = to_lunar(date(2024, 2, 9))
        assert eve.year == 2023
        assert eve.month == 12
        assert eve.day == 30

    def test_leap_month_2023(self):
        assert to_lunar(date(2023, 2, 20)) == LunarDate(2023, 2, 1)
        assert to_lunar(date(2023, 3, 22)) == LunarDate(2023, 2, 1, is_leap=True)

    def test_leap_month_2020(self):
        assert to_lunar(date(2020, 4, 23)) == LunarDate(2020, 4, 1)
        assert to_lunar(date(2020, 5, 23)) == LunarDate(2020, 4, 1, is_leap=True)

    def test_mid_autumn_2024(self):
        assert to_lunar(date(2024, 9, 17)) == LunarDate(2024, 8, 15)

    def test_accepts_datetime(self):
        assert to_lunar(datetime(2024, 2, 10, 23, 59)) == LunarDate(2024, 1, 1)

    @pytest.mark.parametrize("solar", [date(1900, 1, 30), date(1899, 12, 31), date(2101, 1, 1)])
    def test_out_of_range(self, solar):
        with pytest.raises(OutOfRange):
            to_lunar(solar)

    def test_last_supported_day(self):
        lunar = to_lunar(date(2100, 12, 31))
        assert lunar.year == 2100

    def test_consecutive_days_advance_by_one(self):
        """Across a decade each day is either the next day or a new month starting at 1."""
        day = date(2019, 12, 1)
        previous = to_lunar(day)
        month_length = previous.day
        while day < date(2031, 1, 1):
            day += timedelta(days=1)
            current = to_lunar(day)
            if current.day == 1:
                assert month_length in (29, 30), day
                month_length = 1
            else:
                assert current.day == previous.day + 1, day
                assert (current.year, current.month, current.is_leap) == (
                    previous.year,
                    previous.month,
                    previous.is_leap,
                )
                month_length = current.day
            assert 1 <= current.day <= 30
            assert 1 <= current.month <= 12
            previous = current


class TestWeekday:
    def test_epoch_is_wednesday(self):
        assert weekday_index(date(1900, 1, 31)) == 2

    def test_matches_stdlib(self):
        day = date(2024, 1, 1)
        for _ in range(30):
            assert weekday_index(day) == day.weekday()
            day += timedelta(days=1)


class TestCalendarResolver:
    def test_lunar_new_year_2024(self, resolver):
        info = resolver.resolve(date(2024, 2, 10))
        assert info.lunar.month == 1
        assert info.lunar.day == 1
        assert info.lunar.is_leap is False
        assert info.weekday == "Saturday"

    def test_english_labels(self, resolver):
        info = resolver.resolve(date(2024, 2, 10))
        assert info.solar_date == "2024-02-10"
        assert info.lunar_year == "Jiachen (Dragon)"
        assert info.lunar_month == "Month 1"
        assert info.lunar_day == "Day 1"
        assert info.lunar_date == "Jiachen year, Month 1, Day 1"

    def test_english_leap_label(self, resolver):
        info = resolver.resolve(date(2023, 3, 22))
        assert info.lunar_month == "Leap Month 2"
        assert info.lunar_year == "Guimao (Rabbit)"

    def test_chinese_labels(self, zh_resolver):
        info = zh_resolver.resolve(date(2024, 2, 10))
        assert info.solar_date == "2024年02月10日"
        assert info.weekday == "星期六"
        assert info.lunar_year == "甲辰年（龙年）"
        assert info.lunar_month == "正月"
        assert info.lunar_day == "初一"
        assert info.lunar_date == "甲辰年正月初一"

    def test_chinese_leap_and_day_names(self, zh_resolver):
        assert zh_resolver.resolve(date(2023, 3, 22)).lunar_month == "闰二月"
        assert zh_resolver.resolve(date(2024, 9, 17)).lunar_day == "十五"
        assert zh_resolver.resolve(date(2024, 2, 9)).lunar_month == "腊月"
        assert zh_resolver.resolve(date(2024, 2, 9)).lunar_day == "三十"

    def test_deterministic(self, resolver):
        assert resolver.resolve(date(2024, 6, 1)) == resolver.resolve(date(2024, 6, 1))

    def test_resolve_today_uses_given_date(self, resolver):
        assert resolver.resolve_today(date(2024, 2, 10)).solar == date(2024, 2, 10)

    def test_out_of_range(self, resolver):
        with pytest.raises(OutOfRange):
            resolver.resolve(date(1800, 1, 1))

    def test_unknown_locale(self):
        with pytest.raises(ValueError):
            CalendarResolver(locale="fr")
