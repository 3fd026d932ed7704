from abc import ABC, abstractmethod

import numpy as np

from breakoutrl.training.checkpoint_data import AgentState


class BaseAgent(ABC):

    @abstractmethod
    def act(self, observation: np.ndarray) -> int:
        pass

    @abstractmethod
    def remember(
        self,
        obs: np.ndarray,
        action: int,
        reward: float,
        next_obs: np.ndarray,
        done: bool,
    ):
        pass

    @abstractmethod
    def replay(self, batch_size: int | None = None) -> float:
        pass

    @abstractmethod
    def serialize(self) -> AgentState:
        pass

    @abstractmethod
    def load(self, state: AgentState | dict | None):
        pass
