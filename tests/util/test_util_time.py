import unittest
from datetime import datetime, timedelta, timezone

from driveguard.util.time import (
    EARLIEST,
    now_utc,
    parse_rfc3339,
    to_rfc3339,
    to_rfc3339_or_none,
)


class TestUtilTime(unittest.TestCase):
    def test_now_utc_is_tz_aware(self) -> None:
        dt = now_utc()
        self.assertEqual(dt.tzinfo, timezone.utc)

    def test_parse_rfc3339_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56Z")
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_fractional_z(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56.123Z")
        self.assertEqual(dt, datetime(2025, 1, 1, 12, 34, 56, 123000, tzinfo=timezone.utc))

    def test_parse_rfc3339_offset_converts_to_utc(self) -> None:
        dt = parse_rfc3339("2025-01-01T12:34:56+09:00")
        self.assertEqual(dt.tzinfo, timezone.utc)
        # 12:34:56 JST == 03:34:56 UTC
        self.assertEqual(dt, datetime(2025, 1, 1, 3, 34, 56, tzinfo=timezone.utc))

    def test_parse_rfc3339_rejects_bad_input(self) -> None:
        for value in ("", "2025-01-01T12:00:00", "yesterday"):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_rfc3339(value)

    def test_to_rfc3339_millisecond_z(self) -> None:
        dt = datetime(2025, 1, 1, 9, 0, 0, 123456, tzinfo=timezone(timedelta(hours=9)))
        self.assertEqual(to_rfc3339(dt), "2025-01-01T00:00:00.123Z")

    def test_to_rfc3339_rejects_naive(self) -> None:
        with self.assertRaises(ValueError):
            to_rfc3339(datetime(2025, 1, 1))

    def test_optional_and_earliest(self) -> None:
        self.assertIsNone(to_rfc3339_or_none(None))
        self.assertLess(EARLIEST, parse_rfc3339("1970-01-01T00:00:00Z"))


if __name__ == "__main__":
    unittest.main()
