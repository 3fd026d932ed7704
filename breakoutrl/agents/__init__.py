"""
Agent implementations for BreakoutRL.

This module provides the dense Q-network, the replay buffer and the DQN
agent that combines them.
"""

from .base_agent import BaseAgent
from .dense_network import DenseNetwork
from .dqn_agent import DqnAgent
from .replay_buffer import ReplayBuffer

__all__ = [
    'BaseAgent',
    'DenseNetwork',
    'DqnAgent',
    'ReplayBuffer',
]
