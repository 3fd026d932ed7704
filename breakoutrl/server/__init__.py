"""Snapshot service: a bounded, file-backed history of training checkpoints."""

from breakoutrl.server.app import create_app
from breakoutrl.server.snapshot_store import SnapshotStore

__all__ = ["create_app", "SnapshotStore"]
