import unittest
from datetime import datetime, timezone

from core_fakes import (
    QUARANTINE,
    SCAN,
    RecordingObserver,
    RecordingSink,
    SlowFirstSink,
    api_error,
    settle,
)

from driveguard.core.gateway import BroadcastGateway
from driveguard.core.state import StateStore
from driveguard.models import ChangeCounts, FileRecord, Location

DT = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


class BrokenObserver:
    async def send(self, event) -> None:
        raise ConnectionError("socket closed")


def make_store() -> StateStore:
    store = StateStore()
    store.replace(
        [
            FileRecord(
                file_id="A",
                name="a.txt",
                mime_type="text/plain",
                location=Location.SCAN,
                modified_at=DT,
                md5_checksum="m",
                size=3,
            )
        ]
    )
    return store


class TestBroadcastGateway(unittest.IsolatedAsyncioTestCase):
    async def test_publish_sends_merged_view_with_folders(self) -> None:
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN, quarantine_folder_id=QUARANTINE)
        observer = RecordingObserver()
        gateway.add_observer(observer)
        gateway.add_observer(observer)

        await gateway.publish(ChangeCounts(added=1))

        self.assertEqual(gateway.observer_count, 1)
        [event] = observer.of("file_list")
        payload = event.to_payload()
        self.assertEqual(payload["changes"], {"added": 1, "modified": 0, "deleted": 0})
        self.assertEqual(payload["folders"], {"scanFolderId": SCAN, "quarantineFolderId": QUARANTINE})
        self.assertEqual(payload["files"][0]["id"], "A")
        self.assertEqual(payload["files"][0]["scanStatus"], "pending")

    async def test_failing_observer_does_not_stop_broadcast(self) -> None:
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN)
        good = RecordingObserver()
        gateway.add_observer(BrokenObserver())
        gateway.add_observer(good)

        with self.assertLogs("driveguard.core.gateway", level="WARNING"):
            await gateway.publish()

        self.assertEqual(len(good.of("file_list")), 1)

    async def test_report_rows_forwarded_to_sink(self) -> None:
        sink = RecordingSink()
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN, reporting_sink=sink)

        await gateway.publish()
        await gateway.drain()

        self.assertEqual(len(sink.writes), 1)
        header, row = sink.writes[0]
        self.assertEqual(header, ["MD5", "Name", "Size", "Type", "Time", "Status"])
        self.assertEqual(row, ["m", "a.txt", "3", "PLAIN", "2025-01-01T00:00:00.000Z", "pending"])

    async def test_sink_failure_becomes_alert(self) -> None:
        sink = RecordingSink(error=api_error("quota"))
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN, reporting_sink=sink)
        observer = RecordingObserver()
        gateway.add_observer(observer)

        with self.assertLogs("driveguard.core.gateway", level="ERROR"):
            await gateway.publish()
            await gateway.drain()

        self.assertEqual(len(observer.of("file_list")), 1)
        [alert] = observer.of("scan_alert")
        self.assertEqual(alert.error, "Sheet update failed: quota")
        self.assertIsNone(alert.file_id)

    async def test_unexpected_sink_error_becomes_alert(self) -> None:
        sink = RecordingSink(error=RuntimeError("socket closed"))
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN, reporting_sink=sink)
        observer = RecordingObserver()
        gateway.add_observer(observer)

        with self.assertLogs("driveguard.core.gateway", level="ERROR"):
            await gateway.publish()
            await gateway.drain()

        [alert] = observer.of("scan_alert")
        self.assertEqual(alert.error, "Sheet update failed: socket closed")

        # The writer survives the failure.
        sink.error = None
        await gateway.publish()
        await gateway.drain()
        self.assertEqual(len(sink.writes), 1)

    async def test_slow_write_does_not_overwrite_newer_list(self) -> None:
        store = StateStore()
        sink = SlowFirstSink()
        gateway = BroadcastGateway(store, scan_folder_id=SCAN, reporting_sink=sink)

        await gateway.publish()
        await settle()
        store.replace(make_store().files())
        await gateway.publish()
        await gateway.publish()
        await gateway.drain()

        self.assertEqual(len(sink.writes), 2)
        self.assertEqual(len(sink.writes[0]), 1)
        self.assertEqual([row[1] for row in sink.writes[-1][1:]], ["a.txt"])

    async def test_remove_observer(self) -> None:
        gateway = BroadcastGateway(make_store(), scan_folder_id=SCAN)
        observer = RecordingObserver()
        gateway.add_observer(observer)
        gateway.remove_observer(observer)
        gateway.remove_observer(observer)

        await gateway.alert("boom", file_id="A")

        self.assertEqual(observer.events, [])


if __name__ == "__main__":
    unittest.main()
