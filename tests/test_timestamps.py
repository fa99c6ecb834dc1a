import unittest
from datetime import datetime, timezone

from gpxtrack.domain.timestamps import ensure_utc, parse_iso8601


class ParseIso8601Tests(unittest.TestCase):
    def test_zulu_suffix(self):
        self.assertEqual(
            parse_iso8601("2011-06-01T12:30:05Z"),
            datetime(2011, 6, 1, 12, 30, 5, tzinfo=timezone.utc),
        )

    def test_offset_is_normalised_to_utc(self):
        self.assertEqual(
            parse_iso8601("2011-06-01T14:30:05+02:00"),
            datetime(2011, 6, 1, 12, 30, 5, tzinfo=timezone.utc),
        )

    def test_fractional_seconds_are_kept(self):
        parsed = parse_iso8601("2011-06-01T12:30:05.250Z")
        self.assertEqual(parsed.microsecond, 250000)

    def test_surrounding_whitespace_is_ignored(self):
        self.assertEqual(
            parse_iso8601("\n   2011-06-01T12:30:05Z  \n"),
            datetime(2011, 6, 1, 12, 30, 5, tzinfo=timezone.utc),
        )

    def test_naive_time_uses_local_timezone(self):
        # Europe/Paris est en UTC+2 en été
        self.assertEqual(
            parse_iso8601("2011-06-01T14:30:05", "Europe/Paris"),
            datetime(2011, 6, 1, 12, 30, 5, tzinfo=timezone.utc),
        )

    def test_invalid_values(self):
        for value in ["", "   ", "hier", "2011-06-01", "2011-13-01T00:00:00Z", "12:30:05"]:
            with self.assertRaises(ValueError, msg=value):
                parse_iso8601(value)


class EnsureUtcTests(unittest.TestCase):
    def test_aware_datetime_is_converted(self):
        paris = datetime.fromisoformat("2011-01-01T13:00:00+01:00")
        self.assertEqual(ensure_utc(paris), datetime(2011, 1, 1, 12, 0, tzinfo=timezone.utc))

    def test_naive_datetime_defaults_to_utc(self):
        self.assertEqual(
            ensure_utc(datetime(2011, 1, 1, 12, 0)),
            datetime(2011, 1, 1, 12, 0, tzinfo=timezone.utc),
        )


if __name__ == "__main__":
    unittest.main()
