from __future__ import annotations

import datetime

import pytest

from vacsplit.holidays import (
    HolidayDate,
    expand_holidays,
    get_holidays_for_year,
    holiday_set,
    holidays_for_window,
    supported_countries,
)

D = datetime.date


class TestExpandHolidays:
    def test_one_entry_per_day(self) -> None:
        days = expand_holidays([(D(2024, 12, 24), D(2024, 12, 27), "Christmas break")])
        assert days == [
            HolidayDate(D(2024, 12, 24), "Christmas break"),
            HolidayDate(D(2024, 12, 25), "Christmas break"),
            HolidayDate(D(2024, 12, 26), "Christmas break"),
        ]

    def test_end_is_exclusive(self) -> None:
        assert expand_holidays([(D(2024, 5, 1), D(2024, 5, 1), "Empty")]) == []

    def test_datetimes_are_normalized(self) -> None:
        days = expand_holidays(
            [(datetime.datetime(2024, 5, 1, 3, 0), datetime.datetime(2024, 5, 2, 0, 0), "Labour")]
        )
        assert days == [HolidayDate(D(2024, 5, 1), "Labour")]
        assert type(days[0].date) is datetime.date


class TestHolidaySource:
    def test_us_independence_day(self) -> None:
        intervals = get_holidays_for_year("US", None, 2025)
        assert any(s == D(2025, 7, 4) and e == D(2025, 7, 5) for s, e, _n in intervals)

    def test_country_code_is_case_insensitive(self) -> None:
        dates = {s for s, _e, _n in get_holidays_for_year("br", None, 2025)}
        assert D(2025, 1, 1) in dates
        assert D(2025, 4, 21) in dates  # Tiradentes

    def test_region_adds_local_holidays(self) -> None:
        national = {s for s, _e, _n in get_holidays_for_year("BR", None, 2025)}
        sao_paulo = {s for s, _e, _n in get_holidays_for_year("BR", "SP", 2025)}
        assert national < sao_paulo
        assert D(2025, 7, 9) in sao_paulo

    def test_region_code_is_case_insensitive(self) -> None:
        dates = {s for s, _e, _n in get_holidays_for_year("br", "sp", 2025)}
        assert D(2025, 7, 9) in dates

    def test_unknown_country(self) -> None:
        with pytest.raises(KeyError, match="Unknown country"):
            get_holidays_for_year("XX", None, 2025)

    def test_unknown_region(self) -> None:
        with pytest.raises(KeyError, match="Unknown region"):
            get_holidays_for_year("BR", "ZZ", 2025)

    def test_supported_countries(self) -> None:
        countries = supported_countries()
        assert "BR" in countries
        assert "SP" in countries["BR"]


class TestHolidaysForWindow:
    def test_merges_years_of_window(self) -> None:
        entries = holidays_for_window("BR", None, D(2024, 11, 1), D(2025, 2, 1))
        dates = [h.date for h in entries]
        assert D(2024, 12, 25) in dates
        assert D(2025, 1, 1) in dates
        assert dates == sorted(dates)

    def test_no_country_uses_extra_only(self) -> None:
        entries = holidays_for_window(
            None, None, D(2024, 1, 1), D(2024, 12, 31), [(D(2024, 3, 11), D(2024, 3, 13), "Offsite")]
        )
        assert [h.date for h in entries] == [D(2024, 3, 11), D(2024, 3, 12)]

    def test_holiday_set(self) -> None:
        entries = [HolidayDate(D(2024, 1, 1), "A"), HolidayDate(D(2024, 1, 1), "B")]
        assert holiday_set(entries) == frozenset([D(2024, 1, 1)])
