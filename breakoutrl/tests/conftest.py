"""
Shared test utilities for BreakoutRL tests.

Following YAGNI principles, this module contains only what is actually used:
- Small agent and network factories
- Transition helpers
- Snapshot service fixtures
- Assertion utilities for validation
"""

import numpy as np
import pytest

from breakoutrl.agents.dqn_agent import DqnAgent
from breakoutrl.server.app import create_app
from breakoutrl.server.config import ServerConfig
from breakoutrl.server.snapshot_store import SnapshotStore

STATE_SIZE = 5
ACTION_SIZE = 3


def make_agent(**overrides) -> DqnAgent:
    """Minimal agent for fast testing, seeded for reproducible weights"""
    params = dict(
        input_size=STATE_SIZE,
        action_size=ACTION_SIZE,
        hidden_size=8,
        learning_rate=0.05,
        initial_epsilon=1.0,
        epsilon_decay=0.9,
        final_epsilon=0.1,
        batch_size=4,
        replay_buffer_size=50,
        rng=np.random.default_rng(0),
    )
    params.update(overrides)
    return DqnAgent(**params)


def make_state(value: float, size: int = STATE_SIZE) -> np.ndarray:
    return np.full(size, value, dtype=np.float64)


def fill_buffer(agent: DqnAgent, count: int):
    """Add count distinguishable transitions (action cycles through the action space)"""
    for i in range(count):
        agent.remember(
            make_state(i * 0.01),
            i % agent.action_space_size,
            float(i),
            make_state((i + 1) * 0.01),
            i % 7 == 6,
        )


def assert_valid_action_range(action: int, min_action: int, max_action: int):
    """Assert that action is within valid range"""
    assert (
        min_action <= action <= max_action
    ), f"Action {action} outside range [{min_action}, {max_action}]"
    assert isinstance(action, int), "Action should be integer"


def assert_states_equal(left, right):
    """Assert two AgentStates hold identical values"""
    assert left.epsilon == right.epsilon
    for name in ("weights1", "weights2", "bias1", "bias2"):
        assert np.array_equal(getattr(left.network, name), getattr(right.network, name)), name
    assert len(left.replay_buffer) == len(right.replay_buffer)
    for a, b in zip(left.replay_buffer, right.replay_buffer):
        assert np.array_equal(a.state, b.state)
        assert a.action == b.action
        assert a.reward == b.reward
        assert np.array_equal(a.next_state, b.next_state)
        assert a.done == b.done


@pytest.fixture
def snapshot_store(tmp_path):
    return SnapshotStore(tmp_path / "data" / "snapshots.json", max_snapshots=10)


@pytest.fixture
def snapshot_app(snapshot_store, tmp_path):
    config = ServerConfig(snapshot_file=str(snapshot_store.path), max_snapshots=10)
    return create_app(store=snapshot_store, config=config)
