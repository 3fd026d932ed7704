"""Checkpoint client mediating between the agent and its persistence backends.

Agent state is kept in two places: a local pickle slot, written synchronously
after every episode, and the remote snapshot service, written in the
background. Neither backend is required; every failure is logged and the
attempt is skipped, so persistence can never interrupt training.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from breakoutrl.training.checkpoint_data import AgentState, EpisodeStats
from breakoutrl.training.local_checkpoint_repository import LocalCheckpointRepository
from breakoutrl.training.snapshot_client import SnapshotServiceClient

logger = logging.getLogger(__name__)


class CheckpointClient:
    """Persists and restores agent state locally and through the snapshot service.

    Remote calls run on a small thread pool and are never awaited by the
    training loop. Sends may finish out of order; the service keeps whichever
    append arrives last as its latest snapshot.

    The agent itself is only touched from the caller's thread: a snapshot
    fetched in the background is applied by apply_remote_restore(), which the
    training loop calls between episodes.
    """

    def __init__(
        self,
        agent,
        repository: LocalCheckpointRepository,
        remote: SnapshotServiceClient | None = None,
        max_workers: int = 4,
    ):
        """Initialize checkpoint client.

        Args:
            agent: DqnAgent (anything with serialize() and load())
            repository: Local checkpoint slot
            remote: Optional snapshot service client; None keeps everything local
            max_workers: Threads available for concurrent remote calls
        """
        self.agent = agent
        self.repository = repository
        self.remote = remote
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="snapshot"
        )
        self._restore_future: Future | None = None
        # Last completed episode known to be stored, None when unknown
        self.episode: int | None = None
        self._closed = False

    def restore_on_startup(self) -> Future | None:
        """Load the local checkpoint, then start fetching the remote one.

        Returns:
            Future of the remote fetch, or None without a remote service
        """
        self.restore_local()

        if self.remote is None:
            return None
        self._restore_future = self._submit(self.remote.fetch_latest)
        return self._restore_future

    def restore_local(self) -> bool:
        """Best-effort load of the local slot. Returns True when state was loaded."""
        try:
            if not self.repository.exists():
                logger.info("No local checkpoint at %s", self.repository.get_path())
                return False
            episode = self.repository.episode()
            self.agent.load(self.repository.load())
            self.episode = episode
        except Exception as e:
            logger.warning("Ignoring unreadable local checkpoint: %s", e)
            return False

        logger.info(
            "Restored agent from %s (episode %s)", self.repository.get_path(), self.episode
        )
        return True

    def apply_remote_restore(self, wait: bool = False, timeout: float | None = None) -> bool:
        """Load the snapshot fetched by restore_on_startup once it has arrived.

        The remote copy is authoritative: it replaces the in-memory state and
        is written to the local slot. Without wait, returns False immediately
        while the fetch is still running.

        Returns:
            True when a remote snapshot was applied
        """
        future = self._restore_future
        if future is None:
            return False
        if not wait and not future.done():
            return False

        try:
            record = future.result(timeout=timeout)
        except FutureTimeoutError:
            logger.info("Remote snapshot still loading, continuing with local state")
            return False
        except Exception as e:
            self._restore_future = None
            logger.warning("Could not fetch remote snapshot: %s", e)
            return False
        self._restore_future = None

        if not isinstance(record, dict) or not record.get("snapshot"):
            logger.info("Snapshot service holds no snapshots yet")
            return False

        try:
            self.agent.load(record["snapshot"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Ignoring incompatible remote snapshot %s: %s", record.get("id"), e)
            return False

        episode = record.get("episode")
        if isinstance(episode, (int, float)) and not isinstance(episode, bool):
            self.episode = int(episode)

        logger.info(
            "Restored agent from remote snapshot %s (episode %s)",
            record.get("id"),
            episode,
        )
        self.persist()
        return True

    def persist(self, snapshot: AgentState | None = None, episode: int | None = None) -> bool:
        """Write the given snapshot, or the live agent state, to the local slot.

        The slot records episode, or the last known one when not given.
        Never raises; returns False when the write failed.
        """
        if episode is not None:
            self.episode = episode
        try:
            if snapshot is None:
                snapshot = self.agent.serialize()
            self.repository.save(snapshot, episode=self.episode)
        except Exception as e:
            logger.warning("Failed to persist checkpoint locally: %s", e)
            return False
        return True

    def send_snapshot(
        self,
        summary: EpisodeStats | dict[str, Any],
        snapshot: AgentState | dict[str, Any] | None = None,
    ) -> Future | None:
        """Post a snapshot with its episode statistics in the background.

        Fire-and-forget: delivery is at most once and failures only produce
        a warning.

        Returns:
            Future of the request, or None when nothing was sent
        """
        if self.remote is None:
            return None

        if isinstance(summary, EpisodeStats):
            episode, stats = summary.episode, summary.summary()
        else:
            stats = dict(summary)
            episode = stats.pop("episode")

        if snapshot is None:
            snapshot = self.agent.serialize()
        if isinstance(snapshot, AgentState):
            snapshot = snapshot.to_dict()

        future = self._submit(self.remote.append, episode, stats, snapshot)
        if future is not None:
            future.add_done_callback(lambda f: self._log_send_result(episode, f))
        return future

    @staticmethod
    def _log_send_result(episode, future: Future):
        if future.cancelled():
            logger.info("Snapshot for episode %s dropped at shutdown", episode)
            return
        try:
            created = future.result()
        except Exception as e:
            logger.warning("Failed to send snapshot for episode %s: %s", episode, e)
            return
        logger.debug("Snapshot %s stored for episode %s", created.get("id"), episode)

    def _submit(self, fn, *args) -> Future | None:
        try:
            return self._executor.submit(fn, *args)
        except RuntimeError as e:
            logger.warning("Checkpoint client is closed, skipping remote call: %s", e)
            return None

    def close(self, wait: bool = False):
        """Final local persist, then stop accepting remote work.

        In-flight sends are not awaited unless wait is set; without wait, sends
        still queued behind them are cancelled.
        """
        if self._closed:
            return
        self._closed = True
        self.persist()
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        if wait and self.remote is not None:
            self.remote.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
