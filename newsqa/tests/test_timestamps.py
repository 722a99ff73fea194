import unittest
from datetime import datetime, timedelta, timezone

from newsqa.models import ListingItem
from newsqa.timestamps import extract_timestamp, parse_timestamp


class _RaisingItem(ListingItem):
    def get_timestamp_attribute(self):
        raise LookupError("Age element not found")


class ParseTimestampTests(unittest.TestCase):
    def test_listing_format_uses_iso_part(self):
        parsed = parse_timestamp("2024-09-10T12:34:56 1725971696")
        self.assertEqual(parsed, datetime(2024, 9, 10, 12, 34, 56, tzinfo=timezone.utc))

    def test_naive_iso_is_utc(self):
        parsed = parse_timestamp("2024-09-10T12:34:56")
        self.assertEqual(parsed.tzinfo, timezone.utc)
        self.assertEqual(parsed.hour, 12)

    def test_z_suffix_and_offsets_normalise_to_utc(self):
        self.assertEqual(
            parse_timestamp("2024-09-10T12:34:56Z"),
            datetime(2024, 9, 10, 12, 34, 56, tzinfo=timezone.utc),
        )
        self.assertEqual(
            parse_timestamp("2024-09-10T14:34:56+02:00"),
            datetime(2024, 9, 10, 12, 34, 56, tzinfo=timezone.utc),
        )

    def test_epoch_seconds_only(self):
        self.assertEqual(
            parse_timestamp("1725971696"),
            datetime.fromtimestamp(1725971696, tz=timezone.utc),
        )

    def test_falls_back_to_epoch_when_iso_part_is_broken(self):
        self.assertEqual(
            parse_timestamp("yesterday 1725971696"),
            datetime.fromtimestamp(1725971696, tz=timezone.utc),
        )

    def test_garbage_is_unknown(self):
        for raw in (None, "", "   ", "just now", "2024-13-45T99:00:00"):
            self.assertIsNone(parse_timestamp(raw), raw)


class ExtractTimestampTests(unittest.TestCase):
    def test_reads_through_the_accessor(self):
        ts = datetime(2024, 9, 10, 12, 0, tzinfo=timezone.utc)
        item = ListingItem(age_title=(ts - timedelta(seconds=1)).isoformat())
        self.assertEqual(extract_timestamp(item), ts - timedelta(seconds=1))

    def test_missing_attribute_is_unknown(self):
        self.assertIsNone(extract_timestamp(ListingItem(age_title=None)))
        self.assertIsNone(extract_timestamp(ListingItem(age_title="")))

    def test_accessor_errors_are_logged_and_swallowed(self):
        with self.assertLogs("newsqa.timestamps", level="WARNING") as captured:
            self.assertIsNone(extract_timestamp(_RaisingItem()))
        self.assertIn("Error getting timestamp for article", captured.output[0])


if __name__ == "__main__":
    unittest.main()
