import random
from collections import deque

import numpy as np

from breakoutrl.training.checkpoint_data import Transition


class ReplayBuffer:
    def __init__(self, capacity: int):
        self.buffer = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self.buffer.maxlen

    def add(
        self,
        state: np.ndarray,
        action: int,
        reward: float,
        next_state: np.ndarray,
        done: bool,
    ):
        self.buffer.append(Transition(state, action, reward, next_state, done).copy())

    def sample(
        self, batch_size: int
    ) -> tuple[np.ndarray, tuple[int, ...], np.ndarray, np.ndarray, np.ndarray]:
        """Draw batch_size transitions uniformly with replacement."""
        if len(self.buffer) == 0:
            raise ValueError("Cannot sample from an empty replay buffer")

        if batch_size == 0:
            state_shape = self.buffer[0].state.shape
            return (
                np.empty((0, *state_shape)),
                (),
                np.empty(0),
                np.empty((0, *state_shape)),
                np.empty(0, dtype=bool),
            )

        batch = random.choices(self.buffer, k=batch_size)
        states, actions, rewards, next_states, dones = zip(*batch)
        return (
            np.stack(states),
            actions,
            np.array(rewards, dtype=np.float64),
            np.stack(next_states),
            np.array(dones, dtype=bool),
        )

    def transitions(self) -> list[Transition]:
        """Copies of the stored transitions, oldest first."""
        return [transition.copy() for transition in self.buffer]

    def load(self, transitions):
        """Replace the contents. Only the newest `capacity` transitions are kept."""
        self.buffer.clear()
        for transition in transitions:
            self.buffer.append(Transition(*transition).copy())

    def clear(self):
        self.buffer.clear()

    def __len__(self):
        return len(self.buffer)
