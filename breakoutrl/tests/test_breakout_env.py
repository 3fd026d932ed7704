import numpy as np
import pytest

from breakoutrl.environments.breakout_env import (
    ACTION_LEFT,
    ACTION_RIGHT,
    ACTION_STAY,
    BreakoutEnv,
)
from breakoutrl.game.game import FrameEvents
from breakoutrl.game.game_config import GameFactory


@pytest.fixture
def env():
    environment = BreakoutEnv(GameFactory.standard())
    environment.reset()
    return environment


class TestObservation:
    def test_reset_observation(self):
        env = BreakoutEnv()
        obs = env.reset()

        assert obs.shape == (BreakoutEnv.observation_size,)
        assert obs.dtype == np.float64
        assert np.allclose(obs, [0.5, 520 / 600, 362.5 / 800, 1.0, -1.0])

    def test_observation_tracks_paddle(self, env):
        obs, _, _, _ = env.step(ACTION_RIGHT)
        assert obs[2] == pytest.approx(369.5 / 800)

    def test_observation_is_fresh_array(self, env):
        first = env.get_observation()
        first[0] = 99.0
        assert env.get_observation()[0] != 99.0


class TestStep:
    def test_first_step_launches_ball(self, env):
        _, reward, done, info = env.step(ACTION_STAY)

        assert reward == 0.0
        assert not done
        assert env.game.ball_moving
        assert info == {"score": 0, "lives": 3, "won": False, "frames": 1}

    def test_survival_reward_while_moving(self, env):
        env.step(ACTION_STAY)
        _, reward, _, info = env.step(ACTION_STAY)

        assert reward == pytest.approx(0.01)
        assert info["frames"] == 2

    def test_without_auto_launch_ball_stays_held(self):
        env = BreakoutEnv(GameFactory.standard(), auto_launch=False)
        env.reset()

        rewards = [env.step(ACTION_LEFT)[1] for _ in range(10)]

        assert rewards == [0.0] * 10
        assert not env.game.ball_moving

    @pytest.mark.parametrize("action", [-1, 3, 10])
    def test_invalid_action(self, env, action):
        with pytest.raises(ValueError):
            env.step(action)

    def test_step_after_done_raises(self):
        env = BreakoutEnv(GameFactory.small())
        env.reset()
        done = False
        for _ in range(5000):
            _, _, done, info = env.step(ACTION_LEFT)
            if done:
                break

        assert done
        assert info["lives"] == 0 or info["won"]
        with pytest.raises(RuntimeError):
            env.step(ACTION_STAY)

    def test_reset_after_done(self):
        env = BreakoutEnv(GameFactory.small())
        env.reset()
        env.game.game_over(win=False)
        env.done = True

        env.reset()

        assert not env.done
        assert env.frames == 0
        env.step(ACTION_STAY)


class TestReward:
    def test_events_accumulate(self, env):
        events = FrameEvents(bricks_hit=2, life_lost=True, ball_moving=True)
        assert env.compute_reward(events) == pytest.approx(2 + 0.01 - 1)

    def test_held_ball_earns_nothing(self, env):
        assert env.compute_reward(FrameEvents()) == 0.0

    def test_custom_reward_weights(self):
        env = BreakoutEnv(brick_reward=5.0, life_lost_penalty=-3.0, survival_reward=0.0)
        events = FrameEvents(bricks_hit=1, life_lost=True, ball_moving=True)
        assert env.compute_reward(events) == pytest.approx(2.0)

    def test_brick_hit_step(self, env):
        env.step(ACTION_STAY)
        env.game.ball.x, env.game.ball.y = 100.0, 70.0

        _, reward, _, info = env.step(ACTION_STAY)

        assert reward == pytest.approx(1.01)
        assert info["score"] == 1

    def test_lost_life_step(self, env):
        env.step(ACTION_STAY)
        env.game.ball.x, env.game.ball.y, env.game.ball.dy = 50.0, 588.0, 4.0

        _, reward, done, info = env.step(ACTION_STAY)

        assert reward == pytest.approx(-0.99)
        assert not done
        assert info["lives"] == 2

    def test_winning_step(self):
        env = BreakoutEnv(GameFactory.small())
        env.reset()
        env.step(ACTION_STAY)
        for brick in env.game.bricks[:-1]:
            brick.active = False
        env.game.score = 3
        last = env.game.bricks[-1]
        env.game.ball.x, env.game.ball.y = last.x + 10, last.y + 10

        _, reward, done, info = env.step(ACTION_STAY)

        assert reward == pytest.approx(1.0)
        assert done
        assert info["won"]
