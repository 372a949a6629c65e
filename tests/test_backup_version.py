"""Tests for BackupVersion."""

from __future__ import annotations

import pytest

from sealvault.backup.version import BackupVersion
from sealvault.exceptions import FatalError, RetriableError


class TestFromValidatedInteger:
    def test_zero_is_valid(self) -> None:
        assert BackupVersion.from_validated_integer(0).value == 0

    def test_negative_is_fatal(self) -> None:
        with pytest.raises(FatalError) as exc_info:
            BackupVersion.from_validated_integer(-1)
        assert exc_info.value.retryable is False
        assert exc_info.value.context["value"] == -1

    def test_max_i64_is_valid(self) -> None:
        assert BackupVersion.from_validated_integer(2**63 - 1).value == 2**63 - 1

    def test_beyond_i64_is_fatal(self) -> None:
        with pytest.raises(FatalError):
            BackupVersion.from_validated_integer(2**63)

    def test_bool_is_rejected(self) -> None:
        with pytest.raises(FatalError):
            BackupVersion.from_validated_integer(True)


class TestFromString:
    def test_parses_decimal(self) -> None:
        assert BackupVersion.from_string("42") == BackupVersion(42)

    @pytest.mark.parametrize("value", ["abc", "", "1.5", "1_000", " 3", "0x10"])
    def test_not_an_integer_is_retriable(self, value: str) -> None:
        with pytest.raises(RetriableError) as exc_info:
            BackupVersion.from_string(value)
        assert exc_info.value.retryable is True
        assert exc_info.value.context["value"] == value

    @pytest.mark.parametrize("value", [str(2**63), str(-(2**63) - 1), "1" * 30])
    def test_literal_beyond_i64_is_retriable(self, value: str) -> None:
        with pytest.raises(RetriableError) as exc_info:
            BackupVersion.from_string(value)
        assert exc_info.value.retryable is True

    def test_max_i64_literal_is_valid(self) -> None:
        assert BackupVersion.from_string(str(2**63 - 1)).value == 2**63 - 1

    def test_negative_literal_is_fatal(self) -> None:
        with pytest.raises(FatalError) as exc_info:
            BackupVersion.from_string("-3")
        assert exc_info.value.retryable is False


class TestOrdering:
    @pytest.mark.parametrize("a,b", [(0, 1), (1, 1), (5, 2), (2**40, 2**41)])
    def test_order_matches_integers(self, a: int, b: int) -> None:
        va, vb = BackupVersion(a), BackupVersion(b)
        assert (va < vb) == (a < b)
        assert (va == vb) == (a == b)
        assert (va > vb) == (a > b)

    def test_max_picks_latest(self) -> None:
        versions = [BackupVersion(v) for v in (3, 11, 7)]
        assert max(versions) == BackupVersion(11)

    def test_next(self) -> None:
        assert BackupVersion(4).next() == BackupVersion(5)

    def test_string_and_int_forms(self) -> None:
        version = BackupVersion(9)
        assert str(version) == "9"
        assert int(version) == 9

    def test_immutable(self) -> None:
        version = BackupVersion(1)
        with pytest.raises(AttributeError):
            version.value = -1  # type: ignore[misc]
