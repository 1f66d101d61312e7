import json
import unittest
from datetime import datetime, timezone
from unittest.mock import Mock, patch

from driveguard.controller.drive_controller import (
    GoogleDriveController,
    _file_dict_to_file_info,
)
from driveguard.errors import ApiError, NotFoundError, RateLimitError
from driveguard.util.time import to_rfc3339


def _http_error(status: int, reason: str, body: dict | None = None):
    from googleapiclient.errors import HttpError

    resp = Mock()
    resp.status = status
    resp.reason = reason
    content = json.dumps(body).encode("utf-8") if body is not None else b"{}"
    return HttpError(resp=resp, content=content)


class TestDriveControllerHelpers(unittest.TestCase):
    def test_file_dict_to_file_info_parses_fields(self) -> None:
        dt = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)
        data = {
            "id": "F1",
            "name": "n",
            "mimeType": "text/plain",
            "parents": ["P1"],
            "trashed": False,
            "modifiedTime": to_rfc3339(dt),
            "size": "123",
            "md5Checksum": "abc",
            "webViewLink": "https://drive.google.com/file/d/F1/view",
            "webContentLink": "https://drive.google.com/uc?id=F1",
        }
        info = _file_dict_to_file_info(data)
        self.assertEqual(info.file_id, "F1")
        self.assertEqual(info.parents, ["P1"])
        self.assertEqual(info.size, 123)
        self.assertEqual(info.md5_checksum, "abc")
        self.assertEqual(info.modified_time, dt)
        self.assertEqual(info.web_view_link, "https://drive.google.com/file/d/F1/view")
        self.assertEqual(info.web_content_link, "https://drive.google.com/uc?id=F1")

    def test_file_dict_without_optional_fields(self) -> None:
        info = _file_dict_to_file_info({"id": "G1", "name": "Doc", "modifiedTime": "garbage"})
        self.assertIsNone(info.size)
        self.assertIsNone(info.modified_time)
        self.assertIsNone(info.md5_checksum)
        self.assertEqual(info.parents, [])


class TestDriveControllerMocked(unittest.TestCase):
    def _mock_service(self):
        service = Mock()
        files_resource = Mock()
        service.files.return_value = files_resource
        return service, files_resource

    def test_list_children_query_and_kwargs(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.list.return_value.execute.return_value = {"files": []}
        controller = GoogleDriveController.from_service(service, supports_all_drives=True)

        controller.list_children("P1")

        kwargs = files_resource.list.call_args.kwargs
        self.assertTrue(kwargs.get("supportsAllDrives"))
        self.assertTrue(kwargs.get("includeItemsFromAllDrives"))
        self.assertEqual(kwargs["q"], "'P1' in parents and trashed = false")
        self.assertEqual(kwargs["orderBy"], "modifiedTime desc")
        self.assertIn("webContentLink", kwargs["fields"])

    def test_list_children_follows_pages(self) -> None:
        service, files_resource = self._mock_service()
        first = Mock()
        first.execute.return_value = {"files": [{"id": "A"}], "nextPageToken": "t2"}
        second = Mock()
        second.execute.return_value = {"files": [{"id": "B"}]}
        files_resource.list.side_effect = [first, second]
        controller = GoogleDriveController.from_service(service, supports_all_drives=False)

        files = controller.list_children("P1")

        self.assertEqual([f.file_id for f in files], ["A", "B"])
        tokens = [c.kwargs["pageToken"] for c in files_resource.list.call_args_list]
        self.assertEqual(tokens, [None, "t2"])
        self.assertNotIn("supportsAllDrives", files_resource.list.call_args.kwargs)

    def test_move_removes_every_other_parent(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.update.return_value.execute.return_value = {"id": "F1", "parents": ["Q"]}
        controller = GoogleDriveController.from_service(service)

        info = controller.move("F1", "Q", ["S", "X"])

        kwargs = files_resource.update.call_args.kwargs
        self.assertEqual(kwargs["addParents"], "Q")
        self.assertEqual(kwargs["removeParents"], "S,X")
        self.assertEqual(info.parents, ["Q"])

    def test_move_without_parents_to_remove(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.update.return_value.execute.return_value = {"id": "F1", "parents": ["Q"]}
        controller = GoogleDriveController.from_service(service)

        controller.move("F1", "Q", ["Q"])

        self.assertIsNone(files_resource.update.call_args.kwargs["removeParents"])

    def test_get_parents_requests_parent_fields(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.return_value = {"id": "F1", "name": "n", "parents": ["S"]}
        controller = GoogleDriveController.from_service(service)

        info = controller.get_parents("F1")

        self.assertEqual(files_resource.get.call_args.kwargs["fields"], "id,name,parents")
        self.assertEqual(info.parents, ["S"])

    def test_delete_permanently(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.delete.return_value.execute.return_value = ""
        controller = GoogleDriveController.from_service(service)

        controller.delete_permanently("F1")

        self.assertEqual(files_resource.delete.call_args.kwargs["fileId"], "F1")

    def test_get_maps_http_404_to_not_found(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.side_effect = _http_error(404, "Not Found")
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(NotFoundError):
            controller.get("X")

    def test_retry_on_429(self) -> None:
        service, files_resource = self._mock_service()
        req = files_resource.get.return_value
        err = _http_error(
            429,
            "rateLimitExceeded",
            {"error": {"message": "rate limited", "errors": [{"reason": "rateLimitExceeded"}]}},
        )
        # Fail twice, then succeed.
        req.execute.side_effect = [
            err,
            err,
            {"id": "F1", "name": "n", "mimeType": "text/plain", "parents": []},
        ]
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None) as sleep:
            with self.assertLogs("driveguard.controller.base", level="WARNING"):
                info = controller.get("F1")

        self.assertEqual(info.file_id, "F1")
        self.assertEqual(req.execute.call_count, 3)
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_map_429_to_rate_limit_error(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.side_effect = _http_error(
            429,
            "rateLimitExceeded",
            {"error": {"message": "rate limited", "errors": [{"reason": "rateLimitExceeded"}]}},
        )
        controller = GoogleDriveController.from_service(service)

        with patch("time.sleep", return_value=None):
            with self.assertLogs("driveguard.controller.base", level="WARNING"):
                with self.assertRaises(RateLimitError):
                    controller.get("X")

    def test_unknown_exception_becomes_api_error(self) -> None:
        service, files_resource = self._mock_service()
        files_resource.get.return_value.execute.side_effect = RuntimeError("boom")
        controller = GoogleDriveController.from_service(service)

        with self.assertRaises(ApiError) as ctx:
            controller.get("X")
        self.assertIsInstance(ctx.exception.cause, RuntimeError)


if __name__ == "__main__":
    unittest.main()
