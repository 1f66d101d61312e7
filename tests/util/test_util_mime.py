import unittest

from driveguard.util.mime import mime_label


class TestUtilMime(unittest.TestCase):
    def test_subtype_upper_cased(self) -> None:
        self.assertEqual(mime_label("text/plain"), "PLAIN")
        self.assertEqual(mime_label("application/pdf"), "PDF")
        self.assertEqual(
            mime_label("application/vnd.google-apps.document"),
            "VND.GOOGLE-APPS.DOCUMENT",
        )

    def test_without_subtype(self) -> None:
        self.assertEqual(mime_label("binary"), "binary")
        self.assertEqual(mime_label("text/"), "text/")

    def test_empty(self) -> None:
        self.assertEqual(mime_label(""), "Unknown")
        self.assertEqual(mime_label(None), "Unknown")


if __name__ == "__main__":
    unittest.main()
