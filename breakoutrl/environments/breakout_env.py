import numpy as np

from breakoutrl.game.game import Game
from breakoutrl.game.game_config import GameConfig, GameFactory

ACTION_LEFT = 0
ACTION_STAY = 1
ACTION_RIGHT = 2

_DIRECTIONS = {ACTION_LEFT: -1, ACTION_STAY: 0, ACTION_RIGHT: 1}


class BreakoutEnv:
    """Gym-style environment around the headless Breakout game.

    Rewards are accumulated from every event of a frame and flushed once per
    step: brick hits and a lost life detected in the same frame both count,
    and the survival bonus is only paid while the ball is in motion.

    Args:
        config: Game configuration. Defaults to the standard 8x5 board.
        brick_reward: Reward per brick destroyed.
        life_lost_penalty: Reward (negative) for dropping the ball.
        survival_reward: Per-frame reward while the ball is moving.
        auto_launch: Launch a held ball at the end of each step.
    """

    action_space_size = 3
    observation_size = 5

    def __init__(
        self,
        config: GameConfig | None = None,
        brick_reward: float = 1.0,
        life_lost_penalty: float = -1.0,
        survival_reward: float = 0.01,
        auto_launch: bool = True,
    ):
        if config is None:
            config = GameFactory.default()

        self.config = config
        self.brick_reward = brick_reward
        self.life_lost_penalty = life_lost_penalty
        self.survival_reward = survival_reward
        self.auto_launch = auto_launch

        self.game = Game(config)
        self.frames = 0
        self.done = False

    def reset(self) -> np.ndarray:
        self.game.reset()
        self.frames = 0
        self.done = False
        return self.get_observation()

    def step(self, action: int) -> tuple[np.ndarray, float, bool, dict]:
        if self.done:
            raise RuntimeError("Episode done. Call reset()")
        if action not in _DIRECTIONS:
            raise ValueError(f"Invalid action {action}, must be in range 0 to 2")

        events = self.game.update(_DIRECTIONS[action])
        self.frames += 1
        reward = self.compute_reward(events)
        self.done = self.game.done()

        if self.auto_launch and not self.done:
            self.game.launch()

        info = {
            "score": self.game.score,
            "lives": self.game.lives,
            "won": self.game.won,
            "frames": self.frames,
        }
        return self.get_observation(), reward, self.done, info

    def compute_reward(self, events) -> float:
        reward = 0.0
        if events.ball_moving:
            reward += self.survival_reward
        reward += events.bricks_hit * self.brick_reward
        if events.life_lost:
            reward += self.life_lost_penalty
        return float(reward)

    def get_observation(self) -> np.ndarray:
        """Normalized (ball x, ball y, paddle x, ball dx, ball dy).

        Velocities are scaled by the launch speed, so they can leave [-1, 1]
        after an angled paddle bounce.
        """
        cfg = self.config
        ball = self.game.ball
        return np.array(
            [
                ball.x / cfg.width,
                ball.y / cfg.height,
                self.game.paddle_x / cfg.width,
                ball.dx / abs(cfg.ball_speed_x),
                ball.dy / abs(cfg.ball_speed_y),
            ],
            dtype=np.float64,
        )
