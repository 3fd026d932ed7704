import random

import numpy as np

from breakoutrl.agents.base_agent import BaseAgent
from breakoutrl.agents.dense_network import DenseNetwork
from breakoutrl.agents.replay_buffer import ReplayBuffer
from breakoutrl.training.checkpoint_data import AgentState


class DqnAgent(BaseAgent):
    """Q-learning agent over a small dense network with experience replay.

    Uses epsilon-greedy exploration with multiplicative decay. Epsilon decays
    once per replay batch that actually trains, never per environment step,
    and is held at final_epsilon once it gets there.
    """

    def __init__(
        self,
        input_size: int,
        action_size: int,
        hidden_size: int = 64,
        learning_rate: float = 0.01,
        gamma: float = 0.95,
        initial_epsilon: float = 1.0,
        epsilon_decay: float = 0.995,
        final_epsilon: float = 0.01,
        batch_size: int = 32,
        replay_buffer_size: int = 1000,
        rng: np.random.Generator | None = None,
    ):
        self.input_size = input_size
        self.action_space_size = action_size

        self.model = DenseNetwork(
            input_size, hidden_size, action_size, learning_rate=learning_rate, rng=rng
        )
        self.replay_buffer = ReplayBuffer(capacity=replay_buffer_size)
        self.batch_size = batch_size

        # exploration
        self.epsilon = initial_epsilon
        self.epsilon_min = final_epsilon
        self.epsilon_decay = epsilon_decay

        # learning
        self.gamma = gamma
        self.learning_rate = learning_rate

    def act(self, observation: np.ndarray) -> int:
        """Select action using epsilon-greedy policy; ties go to the lowest index."""
        if random.random() < self.epsilon:
            return random.randint(0, self.action_space_size - 1)
        q_values = self.model.predict(observation)
        return int(np.argmax(q_values))

    def remember(
        self,
        obs: np.ndarray,
        action: int,
        reward: float,
        next_obs: np.ndarray,
        done: bool,
    ):
        self.replay_buffer.add(obs, action, reward, next_obs, done)

    def replay(self, batch_size: int | None = None) -> float:
        """Train on one sampled batch. Returns mean squared error, 0 when skipped."""
        if batch_size is None:
            batch_size = self.batch_size

        if batch_size <= 0 or len(self.replay_buffer) < batch_size:
            return 0.0

        states, actions, rewards, next_states, dones = self.replay_buffer.sample(
            batch_size
        )

        total_loss = 0.0
        for state, action, reward, next_state, done in zip(
            states, actions, rewards, next_states, dones
        ):
            target = float(reward)
            if not done:
                target += self.gamma * float(np.max(self.model.predict(next_state)))

            target_q = self.model.predict(state)
            target_q[action] = target
            total_loss += self.model.train(state, target_q)

        self.decrease_epsilon()
        return total_loss / batch_size

    def decrease_epsilon(self):
        self.epsilon = max(self.epsilon_min, self.epsilon * self.epsilon_decay)

    def serialize(self) -> AgentState:
        """Deep copy of epsilon, network parameters and replay buffer."""
        return AgentState(
            epsilon=self.epsilon,
            network=self.model.get_parameters(),
            replay_buffer=self.replay_buffer.transitions(),
        )

    def load(self, state: AgentState | dict | None):
        """Restore from a (possibly partial) state. Absent fields are left unchanged.

        Everything is validated before the agent is modified.

        Raises:
            ValueError: If the network parameters or stored transitions do not
                match this agent's shapes
        """
        if not state:
            return
        if isinstance(state, dict):
            state = AgentState.from_dict(state)

        if state.replay_buffer is not None:
            self._check_transitions(state.replay_buffer)
        if state.network is not None:
            self.model.set_parameters(
                weights1=state.network.weights1,
                weights2=state.network.weights2,
                bias1=state.network.bias1,
                bias2=state.network.bias2,
            )
        if state.epsilon is not None:
            self.epsilon = float(state.epsilon)
        if state.replay_buffer is not None:
            self.replay_buffer.load(state.replay_buffer)

    def _check_transitions(self, transitions):
        expected = (self.input_size,)
        for index, transition in enumerate(transitions):
            state, action, _, next_state, _ = transition
            if np.shape(state) != expected or np.shape(next_state) != expected:
                raise ValueError(
                    f"Transition {index} has state shape {np.shape(state)}, expected {expected}"
                )
            if not 0 <= action < self.action_space_size:
                raise ValueError(
                    f"Transition {index} has action {action} outside 0..{self.action_space_size - 1}"
                )
