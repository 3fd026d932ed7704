import math
from dataclasses import dataclass

from breakoutrl.game.game_config import GameConfig, GameFactory


@dataclass
class Ball:
    x: float
    y: float
    dx: float
    dy: float


@dataclass
class Brick:
    x: float
    y: float
    active: bool = True


@dataclass
class FrameEvents:
    """What happened during a single frame, in the order it was detected."""

    bricks_hit: int = 0
    life_lost: bool = False
    ball_moving: bool = False
    game_over: bool = False
    won: bool = False


class Game:
    """Headless Breakout simulation advanced one frame at a time.

    Frame order is: brick collisions, then ball movement (walls, paddle,
    floor), then paddle movement. A frame can therefore report a brick hit
    and a lost life together.
    """

    def __init__(self, config: GameConfig = GameFactory.default()):
        self.config = config
        self.reset()

    def reset(self):
        self.score = 0
        self.lives = self.config.lives
        self.running = True
        self.won = False
        self.bricks = self.create_bricks()
        self.reset_ball_and_paddle()

    def create_bricks(self) -> list[Brick]:
        cfg = self.config
        bricks = []
        for col in range(cfg.brick_cols):
            for row in range(cfg.brick_rows):
                x = col * (cfg.brick_width + cfg.brick_padding) + cfg.brick_offset_left
                y = row * (cfg.brick_height + cfg.brick_padding) + cfg.brick_offset_top
                bricks.append(Brick(x, y))
        return bricks

    def reset_ball_and_paddle(self):
        cfg = self.config
        self.ball_moving = False
        self.ball = Ball(
            x=cfg.width / 2,
            y=cfg.height - 30 - cfg.paddle_bottom_margin,
            dx=cfg.ball_speed_x,
            dy=cfg.ball_speed_y,
        )
        self.paddle_x = (cfg.width - cfg.paddle_width) / 2

    def launch(self):
        if self.running and not self.ball_moving:
            self.ball_moving = True

    def bricks_left(self) -> int:
        return sum(1 for brick in self.bricks if brick.active)

    def done(self) -> bool:
        return not self.running

    def update(self, direction: int = 0) -> FrameEvents:
        """Advance one frame. direction is -1 (left), 0 (stay) or 1 (right)."""
        events = FrameEvents()
        if not self.running:
            events.game_over = True
            events.won = self.won
            return events

        events.bricks_hit = self.collision_detection()
        if self.score == self.config.total_bricks:
            self.game_over(win=True)
            events.game_over = True
            events.won = True
            return events

        events.ball_moving = self.ball_moving
        if self.ball_moving:
            events.life_lost = self.move_ball()
            if not self.running:
                events.game_over = True
                return events
        else:
            self.stick_ball_to_paddle()

        self.move_paddle(direction)
        return events

    def collision_detection(self) -> int:
        cfg = self.config
        hits = 0
        for brick in self.bricks:
            if not brick.active:
                continue
            if (
                brick.x < self.ball.x < brick.x + cfg.brick_width
                and brick.y < self.ball.y < brick.y + cfg.brick_height
            ):
                self.ball.dy = -self.ball.dy
                brick.active = False
                self.score += 1
                hits += 1
        return hits

    def move_ball(self) -> bool:
        """Move the ball one frame. Returns True when a life was lost.

        After a lost life the ball is re-served and still takes this frame's
        step; the next frame snaps it back onto the paddle.
        """
        cfg = self.config
        ball = self.ball
        radius = cfg.ball_radius
        life_lost = False

        if ball.x + ball.dx > cfg.width - radius or ball.x + ball.dx < radius:
            ball.dx = -ball.dx

        if ball.y + ball.dy < radius:
            ball.dy = -ball.dy
        elif ball.y + ball.dy > cfg.height - radius - cfg.paddle_bottom_margin:
            paddle_top = cfg.paddle_top
            if (
                self.paddle_x < ball.x < self.paddle_x + cfg.paddle_width
                and ball.y < paddle_top + radius
            ):
                self.bounce_off_paddle()
            elif ball.y + ball.dy > cfg.height - radius:
                self.lives -= 1
                life_lost = True
                if not self.lives:
                    self.game_over(win=False)
                    return True
                self.reset_ball_and_paddle()
                ball = self.ball

        ball.x += ball.dx
        ball.y += ball.dy
        return life_lost

    def bounce_off_paddle(self):
        # Deflect up to 60 degrees depending on where the paddle was hit
        half_width = self.config.paddle_width / 2
        hit_point = self.ball.x - (self.paddle_x + half_width)
        angle = (hit_point / half_width) * (math.pi / 3)
        speed = math.hypot(self.ball.dx, self.ball.dy)
        self.ball.dx = speed * math.sin(angle)
        self.ball.dy = -speed * math.cos(angle)

    def stick_ball_to_paddle(self):
        cfg = self.config
        self.ball.x = self.paddle_x + cfg.paddle_width / 2
        self.ball.y = cfg.paddle_top - cfg.ball_radius

    def move_paddle(self, direction: int):
        cfg = self.config
        if direction > 0 and self.paddle_x < cfg.width - cfg.paddle_width:
            self.paddle_x += cfg.paddle_speed
        elif direction < 0 and self.paddle_x > 0:
            self.paddle_x -= cfg.paddle_speed

    def game_over(self, win: bool):
        self.running = False
        self.won = win
