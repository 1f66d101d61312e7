import unittest
from datetime import datetime, timezone

from driveguard.models import (
    ChangeCounts,
    DeleteFailedEvent,
    FileDeletedEvent,
    FileListEvent,
    FileMovedEvent,
    MoveFailedEvent,
    ScanStatusEvent,
)

TS = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestEventPayloads(unittest.TestCase):
    def test_file_list(self) -> None:
        event = FileListEvent(
            files=[{"id": "A"}],
            timestamp=TS,
            changes=ChangeCounts(added=1),
            folders={"scanFolderId": "S", "quarantineFolderId": None},
        )
        self.assertEqual(
            event.to_payload(),
            {
                "files": [{"id": "A"}],
                "timestamp": "2025-01-01T12:00:00.000Z",
                "changes": {"added": 1, "modified": 0, "deleted": 0},
                "folders": {"scanFolderId": "S", "quarantineFolderId": None},
            },
        )

    def test_scan_complete(self) -> None:
        event = ScanStatusEvent(file_id="A", status="pending", timestamp=TS, message="m")
        self.assertEqual(event.name, "scan_complete")
        self.assertEqual(event.to_payload()["fileId"], "A")

    def test_file_moved_message_is_optional(self) -> None:
        manual = FileMovedEvent(file_id="A", target_folder_id="Q", timestamp=TS, unchanged=True)
        self.assertNotIn("message", manual.to_payload())
        self.assertTrue(manual.to_payload()["unchanged"])

        auto = FileMovedEvent(file_id="A", target_folder_id="Q", timestamp=TS, message="Auto")
        self.assertEqual(auto.to_payload()["message"], "Auto")

    def test_names(self) -> None:
        self.assertEqual(FileDeletedEvent(file_id="A", timestamp=TS).name, "file_deleted")
        self.assertEqual(MoveFailedEvent("A", "x").to_payload(), {"fileId": "A", "error": "x"})
        self.assertEqual(DeleteFailedEvent(None, "x").name, "delete_failed")


if __name__ == "__main__":
    unittest.main()
