import unittest
from datetime import datetime, timezone

from linkserve.file_content.errors import RangeNotSatisfiableError
from linkserve.file_content.models import ByteRange, FileMetadata
from linkserve.file_content.services import build_headers, parse_range, range_length
from linkserve.file_content.utils import build_content_disposition, guess_mime_from_path


class ParseRangeTests(unittest.TestCase):
    def test_absent_or_malformed_header_means_full_body(self):
        for header in (None, "", "items=0-5", "bytes=", "bytes=-", "bytes=a-b", "bytes=0-1,4-5", "bytes=9-3"):
            with self.subTest(header=header):
                self.assertIsNone(parse_range(header, 100))

    def test_closed_range(self):
        self.assertEqual(parse_range("bytes=50-59", 100), ByteRange(start=50, end=59))

    def test_open_range(self):
        self.assertEqual(parse_range("bytes=90-", 100), ByteRange(start=90, end=99))

    def test_end_is_clamped(self):
        self.assertEqual(parse_range("bytes=10-1000", 100), ByteRange(start=10, end=99))

    def test_suffix_range(self):
        self.assertEqual(parse_range("bytes=-10", 100), ByteRange(start=90, end=99))
        self.assertEqual(parse_range("bytes=-500", 100), ByteRange(start=0, end=99))

    def test_start_past_end_is_unsatisfiable(self):
        with self.assertRaises(RangeNotSatisfiableError) as ctx:
            parse_range("bytes=100-", 100)
        self.assertEqual(ctx.exception.param, "offset")

    def test_zero_suffix_is_unsatisfiable(self):
        with self.assertRaises(RangeNotSatisfiableError):
            parse_range("bytes=-0", 100)

    def test_empty_file_is_unsatisfiable(self):
        with self.assertRaises(RangeNotSatisfiableError):
            parse_range("bytes=0-", 0)

    def test_range_length(self):
        self.assertEqual(range_length(ByteRange(start=50, end=59)), 10)
        self.assertEqual(range_length(None), 0)


class BuildHeadersTests(unittest.TestCase):
    def setUp(self):
        self.meta = FileMetadata(
            exists=True,
            length=100,
            last_modified=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

    def test_full_body(self):
        headers = build_headers(self.meta, None)
        self.assertEqual(headers["Content-Length"], "100")
        self.assertEqual(headers["Accept-Ranges"], "bytes")
        self.assertEqual(headers["Last-Modified"], "Tue, 02 Jan 2024 03:04:05 GMT")
        self.assertNotIn("Content-Range", headers)

    def test_partial_body(self):
        headers = build_headers(self.meta, ByteRange(start=50, end=59))
        self.assertEqual(headers["Content-Length"], "10")
        self.assertEqual(headers["Content-Range"], "bytes 50-59/100")

    def test_disposition(self):
        headers = build_headers(self.meta, None, filename="clip.mp4", download=True)
        self.assertTrue(headers["Content-Disposition"].startswith('attachment; filename="clip.mp4"'))


class UtilsTests(unittest.TestCase):
    def test_content_disposition_escapes_non_ascii(self):
        value = build_content_disposition('bà"d\nname.txt', attachment=False)
        self.assertTrue(value.startswith("inline; "))
        self.assertNotIn("\n", value)
        self.assertIn("filename*=UTF-8''b%C3%A0dname.txt", value)

    def test_guess_mime(self):
        self.assertEqual(guess_mime_from_path("a/b.txt"), "text/plain")
        self.assertEqual(guess_mime_from_path("a/b.unknownext"), "application/octet-stream")


if __name__ == "__main__":
    unittest.main()
