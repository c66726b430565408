"""Unit tests for admission number generation."""
import pytest

from schoolhub.services.admission_service import (
    format_admission_number,
    generate_admission_number,
    highest_sequence,
    parse_sequence,
)

pytestmark = pytest.mark.unit


class TestGenerateAdmissionNumber:
    """Tests for the next-number calculation."""

    def test_continues_after_highest_existing_number(self):
        existing = ["HALL/2024/00001", "HALL/2024/00003"]
        assert generate_admission_number(existing, "HALL", 2024) == "HALL/2024/00004"

    def test_starts_at_one_without_existing_numbers(self):
        assert generate_admission_number([], "HALL", 2024) == "HALL/2024/00001"

    def test_ignores_other_years_and_prefixes(self):
        existing = ["HALL/2023/00042", "ACME/2024/00099", "HALL/2024/00002"]
        assert generate_admission_number(existing, "HALL", 2024) == "HALL/2024/00003"

    def test_ignores_malformed_numbers(self):
        existing = ["HALL/2024/7", "HALL/2024/abcde", None, "", "HALL/2024/00005"]
        assert generate_admission_number(existing, "HALL", 2024) == "HALL/2024/00006"

    def test_prefix_is_matched_literally(self):
        # a regex metacharacter in the prefix must not match arbitrary text
        existing = ["AXB/2024/00009"]
        assert generate_admission_number(existing, "A.B", 2024) == "A.B/2024/00001"


class TestParseSequence:
    """Tests for parsing a single admission number."""

    def test_parses_padded_sequence(self):
        assert parse_sequence("HALL/2024/00012", "HALL", 2024) == 12

    def test_rejects_short_sequences(self):
        assert parse_sequence("HALL/2024/0012", "HALL", 2024) is None

    def test_accepts_sequences_past_five_digits(self):
        assert parse_sequence("HALL/2024/100000", "HALL", 2024) == 100000

    def test_continues_after_six_digit_number(self):
        existing = ["HALL/2024/99999", "HALL/2024/100000"]
        assert generate_admission_number(existing, "HALL", 2024) == "HALL/2024/100001"

    def test_highest_sequence_defaults_to_zero(self):
        assert highest_sequence(["nonsense"], "HALL", 2024) == 0

    def test_format_pads_to_five_digits(self):
        assert format_admission_number("HALL", 2025, 7) == "HALL/2025/00007"
