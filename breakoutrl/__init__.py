"""BreakoutRL: a Q-learning paddle agent with checkpoint synchronization."""
