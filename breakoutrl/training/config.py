"""Training-side configuration for checkpointing and hyperparameters."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class CheckpointConfig:
    """Where the checkpoint client persists and sends agent state."""

    checkpoint_dir: str = "checkpoints"
    service_url: str | None = "http://localhost:4000"
    timeout: float = 5.0
    max_workers: int = 4

    @classmethod
    def from_env(cls) -> "CheckpointConfig":
        """Create config from environment variables or .env file.

        An empty SNAPSHOT_SERVICE_URL disables the remote service.
        """
        return cls(
            checkpoint_dir=os.getenv("CHECKPOINT_DIR", "checkpoints"),
            service_url=os.getenv("SNAPSHOT_SERVICE_URL", "http://localhost:4000") or None,
            timeout=float(os.getenv("SNAPSHOT_TIMEOUT", "5.0")),
            max_workers=int(os.getenv("SNAPSHOT_WORKERS", "4")),
        )


@dataclass
class TrainingConfig:
    """Agent hyperparameters and training loop settings."""

    episodes: int = 200
    batch_size: int = 32
    max_frames: int = 5000
    hidden_size: int = 64
    learning_rate: float = 0.01
    gamma: float = 0.95
    initial_epsilon: float = 1.0
    epsilon_decay: float = 0.995
    final_epsilon: float = 0.01
    replay_buffer_size: int = 1000
