"""Data structures for the checkpoint protocol.

This module defines typed dataclasses for the state that travels between the
agent, the local checkpoint slot and the snapshot service:
- Transition: one (state, action, reward, next_state, done) record
- NetworkParameters: weight matrices and bias vectors of the dense network
- AgentState: the complete unit of checkpointing (epsilon, network, replay buffer)
- EpisodeStats: per-episode statistics sent alongside each snapshot

Every AgentState field is optional so a partial state can be loaded. The
to_dict()/from_dict() pair defines the JSON wire format used by the snapshot
service; numpy arrays become nested lists.
"""

from dataclasses import dataclass
from typing import Any, NamedTuple

import numpy as np


def _array(value) -> np.ndarray | None:
    if value is None:
        return None
    return np.array(value, dtype=np.float64)


class Transition(NamedTuple):
    """One decision step. Stored copies never alias the environment's arrays."""

    state: np.ndarray
    action: int
    reward: float
    next_state: np.ndarray
    done: bool

    def copy(self) -> "Transition":
        return Transition(
            np.array(self.state, dtype=np.float64),
            int(self.action),
            float(self.reward),
            np.array(self.next_state, dtype=np.float64),
            bool(self.done),
        )


@dataclass
class NetworkParameters:
    """Parameters of the dense network. Any of them may be absent in a partial state."""

    weights1: np.ndarray | None = None
    weights2: np.ndarray | None = None
    bias1: np.ndarray | None = None
    bias2: np.ndarray | None = None

    def copy(self) -> "NetworkParameters":
        return NetworkParameters(
            weights1=_array(self.weights1),
            weights2=_array(self.weights2),
            bias1=_array(self.bias1),
            bias2=_array(self.bias2),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            name: (value.tolist() if value is not None else None)
            for name, value in (
                ("weights1", self.weights1),
                ("weights2", self.weights2),
                ("bias1", self.bias1),
                ("bias2", self.bias2),
            )
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NetworkParameters":
        return cls(
            weights1=_array(data.get("weights1")),
            weights2=_array(data.get("weights2")),
            bias1=_array(data.get("bias1")),
            bias2=_array(data.get("bias2")),
        )


@dataclass
class AgentState:
    """Snapshot of everything needed to resume training.

    The random generator state is not captured, so resumed training is
    equivalent in expectation but not bit-reproducible.
    """

    epsilon: float | None = None
    network: NetworkParameters | None = None
    replay_buffer: list[Transition] | None = None

    def copy(self) -> "AgentState":
        return AgentState(
            epsilon=self.epsilon,
            network=self.network.copy() if self.network is not None else None,
            replay_buffer=(
                [Transition(*t).copy() for t in self.replay_buffer]
                if self.replay_buffer is not None
                else None
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"epsilon": self.epsilon}
        data["network"] = self.network.to_dict() if self.network is not None else None
        if self.replay_buffer is None:
            data["replay_buffer"] = None
        else:
            data["replay_buffer"] = [
                {
                    "state": np.asarray(t.state).tolist(),
                    "action": int(t.action),
                    "reward": float(t.reward),
                    "next_state": np.asarray(t.next_state).tolist(),
                    "done": bool(t.done),
                }
                for t in self.replay_buffer
            ]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AgentState":
        """Build a state from its wire form. Missing or null keys stay None."""
        if not data:
            return cls()

        network = data.get("network")
        replay_buffer = data.get("replay_buffer")
        epsilon = data.get("epsilon")
        return cls(
            epsilon=float(epsilon) if epsilon is not None else None,
            network=NetworkParameters.from_dict(network) if network else None,
            replay_buffer=(
                [
                    Transition(
                        np.array(entry["state"], dtype=np.float64),
                        int(entry["action"]),
                        float(entry["reward"]),
                        np.array(entry["next_state"], dtype=np.float64),
                        bool(entry["done"]),
                    )
                    for entry in replay_buffer
                ]
                if replay_buffer is not None
                else None
            ),
        )


@dataclass
class EpisodeStats:
    """Statistics of one completed training episode."""

    episode: int
    score: int
    reward: float
    frames: int
    epsilon: float
    won: bool = False
    loss: float = 0.0

    def summary(self) -> dict[str, Any]:
        """Stats payload sent to the snapshot service."""
        return {
            "score": self.score,
            "reward": self.reward,
            "frames": self.frames,
            "epsilon": self.epsilon,
        }
