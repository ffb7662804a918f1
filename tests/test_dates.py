"""Tests for display-date normalization."""

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from assessment.config import RosterColumns
from assessment.dates import normalize_date, serial_to_date
from assessment.roster import parse_roster


class TestSerialDates:
    def test_day_zero(self) -> None:
        assert normalize_date(0) == "30.12.1899"

    def test_day_one(self) -> None:
        assert normalize_date(1) == "31.12.1899"

    @pytest.mark.parametrize(
        ("serial", "expected"),
        [(36526, date(2000, 1, 1)), (45000, date(2023, 3, 15)), (45000.75, date(2023, 3, 15))],
    )
    def test_known_serials(self, serial, expected) -> None:
        assert serial_to_date(serial) == expected

    def test_numpy_number(self) -> None:
        assert normalize_date(np.int64(36526)) == "1.1.2000"


class TestNormalizeDate:
    def test_date_values_are_formatted(self) -> None:
        assert normalize_date(datetime(2000, 1, 1, 13, 30)) == "1.1.2000"
        assert normalize_date(date(2021, 11, 24)) == "24.11.2021"
        assert normalize_date(pd.Timestamp("2019-07-04")) == "4.7.2019"

    def test_strings_pass_through(self) -> None:
        assert normalize_date("01.01.2000") == "01.01.2000"
        assert normalize_date("Frühjahr 2023") == "Frühjahr 2023"

    @pytest.mark.parametrize("value", [None, "", "   ", float("nan"), pd.NaT])
    def test_empty_values(self, value) -> None:
        assert normalize_date(value) == ""

    def test_booleans_are_not_dates(self) -> None:
        assert normalize_date(True) == ""

    @pytest.mark.parametrize("value", [1e12, -1e12, float("inf"), float("-inf")])
    def test_out_of_range_serials_are_empty(self, value) -> None:
        assert normalize_date(value) == ""

    def test_out_of_range_birthdate_does_not_abort_roster(self) -> None:
        grid = [["TN-ID", "Name", "Geburtsdatum"], ["T1", "Alice", 1e12], ["T2", "Bob", 36526]]
        roster = parse_roster(grid, RosterColumns())
        assert [(p.id, p.birthdate) for p in roster] == [("T1", ""), ("T2", "1.1.2000")]
