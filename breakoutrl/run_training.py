import argparse
import logging

from breakoutrl.agents.dqn_agent import DqnAgent
from breakoutrl.environments.breakout_env import BreakoutEnv
from breakoutrl.game.game_config import GameFactory
from breakoutrl.training.checkpoint_client import CheckpointClient
from breakoutrl.training.config import CheckpointConfig, TrainingConfig
from breakoutrl.training.local_checkpoint_repository import LocalCheckpointRepository
from breakoutrl.training.snapshot_client import SnapshotServiceClient
from breakoutrl.training.training_manager import TrainingManager

logger = logging.getLogger("breakoutrl.run_training")


def parse_args():
    defaults = TrainingConfig()
    parser = argparse.ArgumentParser(description="Train the Breakout DQN agent")
    parser.add_argument("--episodes", type=int, default=defaults.episodes)
    parser.add_argument("--batch-size", type=int, default=defaults.batch_size)
    parser.add_argument("--max-frames", type=int, default=defaults.max_frames)
    parser.add_argument("--learning-rate", type=float, default=defaults.learning_rate)
    parser.add_argument(
        "--local-only",
        action="store_true",
        help="Do not contact the snapshot service",
    )
    return parser.parse_args()


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    args = parse_args()
    config = TrainingConfig(
        episodes=args.episodes,
        batch_size=args.batch_size,
        max_frames=args.max_frames,
        learning_rate=args.learning_rate,
    )
    checkpoint_config = CheckpointConfig.from_env()

    env = BreakoutEnv(GameFactory.standard())
    agent = DqnAgent(
        input_size=BreakoutEnv.observation_size,
        action_size=BreakoutEnv.action_space_size,
        hidden_size=config.hidden_size,
        learning_rate=config.learning_rate,
        gamma=config.gamma,
        initial_epsilon=config.initial_epsilon,
        epsilon_decay=config.epsilon_decay,
        final_epsilon=config.final_epsilon,
        batch_size=config.batch_size,
        replay_buffer_size=config.replay_buffer_size,
    )

    remote = None
    if checkpoint_config.service_url and not args.local_only:
        remote = SnapshotServiceClient(
            checkpoint_config.service_url, timeout=checkpoint_config.timeout
        )

    repository = LocalCheckpointRepository(checkpoint_config.checkpoint_dir)
    with CheckpointClient(
        agent, repository, remote=remote, max_workers=checkpoint_config.max_workers
    ) as checkpoint_client:
        checkpoint_client.restore_on_startup()
        # Give the remote copy a chance to win before the first episode
        checkpoint_client.apply_remote_restore(wait=True, timeout=checkpoint_config.timeout)

        trainer = TrainingManager(
            agent,
            env,
            checkpoint_client=checkpoint_client,
            batch_size=config.batch_size,
            max_frames=config.max_frames,
            start_episode=checkpoint_client.episode or 0,
        )
        try:
            results = trainer.train(config.episodes)
        except KeyboardInterrupt:
            logger.info("Training interrupted, saving local checkpoint")
            results = trainer.history

    if results:
        best = max(results, key=lambda stats: stats.score)
        wins = sum(stats.won for stats in results)
        logger.info(
            "Trained %d episodes: best score %d (episode %d), %d wins, epsilon %.3f",
            len(results),
            best.score,
            best.episode,
            wins,
            agent.epsilon,
        )


if __name__ == "__main__":
    main()
