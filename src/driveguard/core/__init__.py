"""Reconciliation and scan-workflow engine."""

from __future__ import annotations

from .changes import ChangeSet, detect_changes, sort_records
from .gateway import BroadcastGateway, Observer
from .reconciler import ReconciliationLoop
from .relocation import RelocationPolicy
from .report import REPORT_HEADER, build_report_rows
from .scanner import ScanStateMachine
from .scheduler import AsyncioScheduler, Scheduler
from .state import ActivityToken, StateStore
from .verdict import Verdict, is_eicar_like, name_verdict

__all__ = [
    "ChangeSet",
    "detect_changes",
    "sort_records",
    "BroadcastGateway",
    "Observer",
    "ReconciliationLoop",
    "RelocationPolicy",
    "REPORT_HEADER",
    "build_report_rows",
    "ScanStateMachine",
    "Scheduler",
    "AsyncioScheduler",
    "ActivityToken",
    "StateStore",
    "Verdict",
    "is_eicar_like",
    "name_verdict",
]
