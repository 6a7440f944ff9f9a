"""
Tests for DataValidator normalization helpers.
"""
import pytest

from oneiro.core.exceptions import ValidationError
from oneiro.core.validators import DataValidator


class TestRequiredFields:
    def test_present(self):
        DataValidator.validate_required_fields({"date": "2024-01-01"}, ["date"])

    def test_missing(self):
        with pytest.raises(ValidationError, match="'title'"):
            DataValidator.validate_required_fields({"title": ""}, ["title"])


class TestDateString:
    @pytest.mark.parametrize("value", ["2024-01-15", "2024-02-29"])
    def test_valid(self, value):
        assert DataValidator.validate_date_string(value)

    @pytest.mark.parametrize("value", ["2023-02-29", "2024-1-5", "01/15/2024", None, 20240115])
    def test_invalid(self, value):
        assert not DataValidator.validate_date_string(value)


class TestNormalizeNumber:
    @pytest.mark.parametrize(
        "value,expected",
        [("4", 4), (" -2 ", -2), ("3.5", 3.5), (7, 7), (2.5, 2.5)],
    )
    def test_numbers(self, value, expected):
        assert DataValidator.normalize_number(value) == expected

    @pytest.mark.parametrize("value", ["4/5", "1e3", "3.", "high", "", None, True])
    def test_not_numbers(self, value):
        assert DataValidator.normalize_number(value) is None

    def test_int_type_kept(self):
        assert isinstance(DataValidator.normalize_number("4"), int)


class TestNormalizeString:
    def test_whitespace_collapsed(self):
        assert DataValidator.normalize_string("  Sensory \t Detail ") == "Sensory Detail"

    def test_empty(self):
        assert DataValidator.normalize_string("   ") is None
        assert DataValidator.normalize_string(None) is None


class TestNormalizeBool:
    @pytest.mark.parametrize("value", [True, 1, "yes", "ON", "true"])
    def test_true(self, value):
        assert DataValidator.normalize_bool(value) is True

    @pytest.mark.parametrize("value", [False, 0, "no", "off", "False"])
    def test_false(self, value):
        assert DataValidator.normalize_bool(value) is False

    @pytest.mark.parametrize("value", ["maybe", 2])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            DataValidator.normalize_bool(value)

    def test_none(self):
        assert DataValidator.normalize_bool(None) is None


class TestNormalizeInt:
    def test_values(self):
        assert DataValidator.normalize_int("12") == 12
        assert DataValidator.normalize_int(5) == 5
        assert DataValidator.normalize_int("3.0") == 3

    def test_rejected(self):
        assert DataValidator.normalize_int("3.5") is None
        assert DataValidator.normalize_int(True) is None
        assert DataValidator.normalize_int("lots") is None
