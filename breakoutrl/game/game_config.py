"""Game configuration system for the headless Breakout game."""

from dataclasses import dataclass


@dataclass
class GameConfig:
    """Field geometry and ball/paddle dynamics. Units are pixels and pixels per frame."""

    width: int = 800
    height: int = 600

    paddle_width: float = 75.0
    paddle_height: float = 10.0
    paddle_bottom_margin: float = 50.0
    paddle_speed: float = 7.0

    ball_radius: float = 10.0
    ball_speed_x: float = 4.0
    ball_speed_y: float = -4.0

    brick_rows: int = 5
    brick_cols: int = 8
    brick_width: float = 75.0
    brick_height: float = 20.0
    brick_padding: float = 10.0
    brick_offset_top: float = 60.0
    brick_offset_left: float = 65.0

    lives: int = 3

    @property
    def total_bricks(self) -> int:
        return self.brick_rows * self.brick_cols

    @property
    def paddle_top(self) -> float:
        return self.height - self.paddle_height - self.paddle_bottom_margin

    def validate(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Field dimensions must be positive")
        if self.brick_rows <= 0 or self.brick_cols <= 0:
            raise ValueError("Must have at least one brick")
        if self.lives < 1:
            raise ValueError("Must start with at least one life")
        if self.paddle_width >= self.width:
            raise ValueError("Paddle must be narrower than the field")


class GameFactory:

    @staticmethod
    def small() -> GameConfig:
        config = GameConfig(brick_rows=1, brick_cols=4, lives=1)
        config.validate()
        return config

    @staticmethod
    def standard() -> GameConfig:
        config = GameConfig()
        config.validate()
        return config

    @staticmethod
    def default() -> GameConfig:
        return GameFactory.standard()

    @staticmethod
    def custom(brick_rows: int, brick_cols: int, lives: int = 3) -> GameConfig:
        config = GameConfig(brick_rows=brick_rows, brick_cols=brick_cols, lives=lives)
        config.validate()
        return config
