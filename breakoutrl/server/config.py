"""Snapshot service configuration."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


@dataclass
class ServerConfig:
    """Listen address and storage settings of the snapshot service."""

    host: str = "0.0.0.0"
    port: int = 4000
    max_snapshots: int = 500
    snapshot_file: str = "data/snapshots.json"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create config from environment variables or .env file."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "4000")),
            max_snapshots=int(os.getenv("MAX_SNAPSHOTS", "500")),
            snapshot_file=os.getenv("SNAPSHOT_FILE", "data/snapshots.json"),
        )
