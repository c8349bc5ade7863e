import unittest
from datetime import datetime, timezone

from bsnmgr.util.format import format_file_size, format_timestamp


class TestUtilFormat(unittest.TestCase):
    def test_format_file_size(self) -> None:
        self.assertEqual(format_file_size(None), "-")
        self.assertEqual(format_file_size(0), "0 B")
        self.assertEqual(format_file_size(1023), "1023 B")
        self.assertEqual(format_file_size(1024), "1.0 KB")
        self.assertEqual(format_file_size(1536), "1.5 KB")
        self.assertEqual(format_file_size(5 * 1024 * 1024), "5.0 MB")
        self.assertEqual(format_file_size(3 * 1024**3), "3.0 GB")

    def test_format_timestamp(self) -> None:
        self.assertEqual(format_timestamp(None), "-")
        self.assertEqual(
            format_timestamp(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)),
            "2025-01-02 03:04:05 UTC",
        )


if __name__ == "__main__":
    unittest.main()
