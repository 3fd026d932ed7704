"""Tests for checkpoint data structures."""

import json

import numpy as np

from breakoutrl.training.checkpoint_data import (
    AgentState,
    EpisodeStats,
    NetworkParameters,
    Transition,
)


def sample_state() -> AgentState:
    return AgentState(
        epsilon=0.25,
        network=NetworkParameters(
            weights1=np.arange(6, dtype=np.float64).reshape(2, 3),
            weights2=np.arange(3, dtype=np.float64).reshape(3, 1),
            bias1=np.zeros(3),
            bias2=np.array([0.5]),
        ),
        replay_buffer=[
            Transition(np.array([0.1, 0.2]), 0, 1.0, np.array([0.3, 0.4]), False),
            Transition(np.array([0.3, 0.4]), 0, -1.0, np.array([0.5, 0.6]), True),
        ],
    )


class TestTransition:
    """Tests for the Transition record."""

    def test_copy_detaches_arrays(self):
        state = np.array([1.0, 2.0])
        transition = Transition(state, 1, 0.5, state, False)
        copied = transition.copy()

        state[0] = 99.0

        assert copied.state[0] == 1.0
        assert copied.next_state[0] == 1.0

    def test_copy_normalizes_types(self):
        copied = Transition([1, 2], np.int64(2), np.float32(0.5), [3, 4], np.bool_(True)).copy()

        assert isinstance(copied.action, int)
        assert isinstance(copied.reward, float)
        assert copied.done is True
        assert copied.state.dtype == np.float64


class TestAgentState:
    """Tests for AgentState wire format."""

    def test_to_dict_is_json_serializable(self):
        data = sample_state().to_dict()
        encoded = json.dumps(data)
        assert "weights1" in encoded
        assert data["replay_buffer"][1]["done"] is True

    def test_wire_layout(self):
        data = sample_state().to_dict()

        assert set(data) == {"epsilon", "network", "replay_buffer"}
        assert set(data["network"]) == {"weights1", "weights2", "bias1", "bias2"}
        assert data["network"]["weights1"] == [[0.0, 1.0, 2.0], [3.0, 4.0, 5.0]]
        assert set(data["replay_buffer"][0]) == {
            "state",
            "action",
            "reward",
            "next_state",
            "done",
        }

    def test_round_trip(self):
        original = sample_state()
        restored = AgentState.from_dict(json.loads(json.dumps(original.to_dict())))

        assert restored.epsilon == original.epsilon
        assert np.array_equal(restored.network.weights1, original.network.weights1)
        assert np.array_equal(restored.network.bias2, original.network.bias2)
        assert len(restored.replay_buffer) == 2
        assert np.array_equal(restored.replay_buffer[1].next_state, [0.5, 0.6])
        assert restored.replay_buffer[1].done is True

    def test_from_dict_partial(self):
        state = AgentState.from_dict({"epsilon": 0.9})

        assert state.epsilon == 0.9
        assert state.network is None
        assert state.replay_buffer is None

    def test_from_dict_empty(self):
        assert AgentState.from_dict(None) == AgentState()
        assert AgentState.from_dict({}) == AgentState()

    def test_partial_to_dict_keeps_nulls(self):
        data = AgentState(epsilon=0.5).to_dict()
        assert data == {"epsilon": 0.5, "network": None, "replay_buffer": None}

    def test_copy_is_deep(self):
        original = sample_state()
        copied = original.copy()

        copied.network.weights1[0, 0] = -1.0
        copied.replay_buffer[0].state[0] = -1.0

        assert original.network.weights1[0, 0] == 0.0
        assert original.replay_buffer[0].state[0] == 0.1


class TestEpisodeStats:
    """Tests for EpisodeStats."""

    def test_summary_contains_service_stats(self):
        stats = EpisodeStats(episode=3, score=7, reward=6.5, frames=900, epsilon=0.4, won=False)
        assert stats.summary() == {"score": 7, "reward": 6.5, "frames": 900, "epsilon": 0.4}
