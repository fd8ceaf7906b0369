"""Unit tests for timestamp extraction from storage keys."""

from datetime import datetime, timezone

import pytest

from blob_retention.retention.timestamps import extract_timestamp


@pytest.mark.unit
class TestExtractTimestamp:
    """Tests for extract_timestamp."""

    def test_chat_transcript_key(self):
        """Timestamp embedded between a prefix and a random suffix."""
        key = "damilola.tech/chats/production/chat-2024-10-05T14-30-00Z-a1b2c3d4.json"

        assert extract_timestamp(key) == datetime(2024, 10, 5, 14, 30, 0, tzinfo=timezone.utc)

    def test_millisecond_precision(self):
        """Audit events carry millisecond precision."""
        key = "damilola.tech/audit/production/2025-04-21/2025-04-21T14-30-00.123Z-admin_login.json"

        result = extract_timestamp(key)

        assert result == datetime(2025, 4, 21, 14, 30, 0, 123000, tzinfo=timezone.utc)

    def test_whole_basename(self):
        """The timestamp may be the whole basename."""
        key = "damilola.tech/fit-assessments/production/2025-01-01T00-00-00Z.json"

        assert extract_timestamp(key) == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_result_is_utc_aware(self):
        result = extract_timestamp("x/chat-2025-02-03T04-05-06Z-ab.json")

        assert result is not None
        assert result.tzinfo == timezone.utc

    def test_epoch_zero_is_distinct_from_missing(self):
        """A parsed epoch-zero instant is a value, not an absence."""
        result = extract_timestamp("x/chat-1970-01-01T00-00-00Z-ab.json")

        assert result is not None
        assert result == datetime(1970, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "key",
        [
            "damilola.tech/chats/production/invalid-timestamp.json",
            "damilola.tech/audit/development/2025-04-21.json",
            "damilola.tech/chats/production/chat-2024-10-05T14:30:00Z.json",
            "damilola.tech/",
            "",
        ],
    )
    def test_no_timestamp(self, key):
        """Legacy or malformed keys yield None without raising."""
        assert extract_timestamp(key) is None

    def test_out_of_range_fields(self):
        """A well-shaped but impossible date is not a timestamp."""
        assert extract_timestamp("x/chat-2024-13-45T25-61-61Z-ab.json") is None

    def test_only_basename_is_inspected(self):
        """Timestamps in directory segments are ignored."""
        key = "x/2024-10-05T14-30-00Z/notes.json"

        assert extract_timestamp(key) is None

    def test_first_valid_match_wins(self):
        key = "x/chat-2024-13-01T00-00-00Z-2024-06-01T00-00-00Z.json"

        assert extract_timestamp(key) == datetime(2024, 6, 1, tzinfo=timezone.utc)
