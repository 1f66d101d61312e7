import unittest

from driveguard.core.verdict import is_eicar_like, name_verdict
from driveguard.models import ScanStatus


class TestVerdict(unittest.TestCase):
    def test_subsequence_matches(self) -> None:
        self.assertTrue(is_eicar_like("eicar_test.txt"))
        self.assertTrue(is_eicar_like("EICAR-sample"))
        self.assertTrue(is_eicar_like("eicar-test.com"))
        self.assertTrue(is_eicar_like("e_I_c_A_r"))
        self.assertTrue(is_eicar_like("experimental-scan-report.pdf"))

    def test_non_matches(self) -> None:
        self.assertFalse(is_eicar_like("report.pdf"))
        self.assertFalse(is_eicar_like("clean_report.docx"))
        self.assertFalse(is_eicar_like("scared.txt"))
        self.assertFalse(is_eicar_like("race"))
        self.assertFalse(is_eicar_like(""))
        self.assertFalse(is_eicar_like(None))

    def test_order_matters(self) -> None:
        self.assertFalse(is_eicar_like("rac ie"))
        self.assertTrue(is_eicar_like("r e i c a r"))

    def test_name_verdict(self) -> None:
        self.assertEqual(name_verdict("EICAR-sample"), ScanStatus.INFECTED)
        self.assertEqual(name_verdict("a.txt"), ScanStatus.CLEAN)


if __name__ == "__main__":
    unittest.main()
