"""Pickle-based local checkpoint slot.

Provides the durable, process-local side of the checkpoint protocol: a
directory of named slots, each holding the latest AgentState written to it.
This backend needs no network and is always tried first on startup.
"""

import pickle
from pathlib import Path

from breakoutrl.training.checkpoint_data import AgentState


class LocalCheckpointRepository:
    """Repository storing one AgentState per key as a pickle file.

    Directory structure:
        checkpoint_dir/
            breakout-agent.pkl
            ...

    Writes go to a temporary file that is then renamed over the slot, so a
    reader never observes a half-written checkpoint.
    """

    def __init__(self, checkpoint_dir: Path | str, key: str = "breakout-agent"):
        """Initialize repository with checkpoint directory.

        Args:
            checkpoint_dir: Directory path for storing checkpoint slots
            key: Default slot name
        """
        self.checkpoint_dir = Path(checkpoint_dir)
        self.checkpoint_dir.mkdir(parents=True, exist_ok=True)
        self.key = key

    def get_path(self, key: str | None = None) -> Path:
        return self.checkpoint_dir / f"{key or self.key}.pkl"

    def save(
        self, state: AgentState, key: str | None = None, episode: int | None = None
    ) -> Path:
        """Overwrite the slot with state.

        Args:
            state: AgentState to store
            key: Slot name, defaults to the repository key
            episode: Last completed episode, kept next to the state

        Returns:
            Path of the written slot
        """
        path = self.get_path(key)
        payload = state.to_dict()
        payload["episode"] = episode
        tmp_path = path.with_suffix(".tmp")
        with open(tmp_path, "wb") as f:
            pickle.dump(payload, f)
        tmp_path.replace(path)
        return path

    def _read(self, key: str | None) -> dict:
        path = self.get_path(key)
        if not path.exists():
            raise FileNotFoundError(f"Checkpoint not found: {key or self.key}")

        with open(path, "rb") as f:
            return pickle.load(f)

    def load(self, key: str | None = None) -> AgentState:
        """Load the state stored in a slot.

        Raises:
            FileNotFoundError: If the slot is empty
        """
        return AgentState.from_dict(self._read(key))

    def episode(self, key: str | None = None) -> int | None:
        """Episode recorded with the slot, None when it was saved without one.

        Raises:
            FileNotFoundError: If the slot is empty
        """
        episode = self._read(key).get("episode")
        return int(episode) if episode is not None else None

    def exists(self, key: str | None = None) -> bool:
        return self.get_path(key).exists()

    def delete(self, key: str | None = None) -> None:
        """Remove a slot.

        Raises:
            FileNotFoundError: If the slot is empty
        """
        path = self.get_path(key)
        if not path.exists():
            raise FileNotFoundError(f"Checkpoint not found: {key or self.key}")
        path.unlink()
