import unittest
from unittest.mock import Mock, patch

from driveguard.controller.sheets_controller import GoogleSheetsController
from driveguard.errors import ApiError, PermissionError


class TestSheetsControllerMocked(unittest.TestCase):
    def test_update_values_writes_raw_rows_from_a1(self) -> None:
        service = Mock()
        values = service.spreadsheets.return_value.values.return_value
        controller = GoogleSheetsController.from_service(service)

        controller.update_values("SHEET", [("MD5", "Name"), ("abc", "a.txt")])

        kwargs = values.update.call_args.kwargs
        self.assertEqual(kwargs["spreadsheetId"], "SHEET")
        self.assertEqual(kwargs["range"], "A1")
        self.assertEqual(kwargs["valueInputOption"], "RAW")
        self.assertEqual(kwargs["body"], {"values": [["MD5", "Name"], ["abc", "a.txt"]]})
        values.update.return_value.execute.assert_called_once()

    def test_forbidden_is_not_retried(self) -> None:
        from googleapiclient.errors import HttpError

        service = Mock()
        request = service.spreadsheets.return_value.values.return_value.update.return_value
        resp = Mock()
        resp.status = 403
        resp.reason = "Forbidden"
        request.execute.side_effect = HttpError(resp=resp, content=b"{}")
        controller = GoogleSheetsController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertRaises(PermissionError):
                controller.update_values("SHEET", [["x"]])

        sleep.assert_not_called()
        self.assertEqual(request.execute.call_count, 1)

    def test_server_error_is_retried_then_raised(self) -> None:
        from googleapiclient.errors import HttpError

        service = Mock()
        request = service.spreadsheets.return_value.values.return_value.update.return_value
        resp = Mock()
        resp.status = 503
        resp.reason = "Service Unavailable"
        request.execute.side_effect = HttpError(resp=resp, content=b"{}")
        controller = GoogleSheetsController.from_service(service)

        with patch("time.sleep", return_value=None):
            with self.assertLogs("driveguard.controller.base", level="WARNING"):
                with self.assertRaises(ApiError):
                    controller.update_values("SHEET", [["x"]])

        self.assertEqual(request.execute.call_count, 4)


if __name__ == "__main__":
    unittest.main()
