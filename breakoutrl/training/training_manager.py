"""Training manager for running the agent against the Breakout environment.

Provides composable primitives for training orchestration: warmup(),
run_episode(), train() and checkpoint(). Checkpointing is optional and never
blocks the loop: the local write happens before the remote send of the same
episode, and the remote send is not awaited.
"""

from tqdm import tqdm

from breakoutrl.training.checkpoint_data import EpisodeStats


class TrainingManager:
    """Manages DQN training execution with optional checkpointing.

    Tracks cumulative training state across multiple train() calls.
    """

    def __init__(
        self,
        agent,
        env,
        checkpoint_client=None,
        batch_size: int | None = None,
        max_frames: int = 5000,
        start_episode: int = 0,
    ):
        """Initialize training manager.

        Args:
            agent: DqnAgent instance
            env: BreakoutEnv instance
            checkpoint_client: Optional CheckpointClient for persistence
            batch_size: Replay batch size (defaults to the agent's)
            max_frames: Frame limit per episode
            start_episode: Number of episodes already trained
        """
        self.agent = agent
        self.env = env
        self.checkpoint_client = checkpoint_client
        self.batch_size = batch_size if batch_size is not None else agent.batch_size
        self.max_frames = max_frames

        # Training state tracking
        self.current_episode = start_episode
        self.total_frames = 0
        self.history: list[EpisodeStats] = []

    def warmup(self, episodes: int, max_frames: int | None = None):
        """Populate replay buffer with experiences without training.

        Args:
            episodes: Number of warmup episodes to run
            max_frames: Frame limit per warmup episode (defaults to max_frames)
        """
        frames_per_episode = max_frames if max_frames is not None else self.max_frames

        for _ in range(episodes):
            obs = self.env.reset()

            for _ in range(frames_per_episode):
                action = self.agent.act(obs)
                next_obs, reward, done, _ = self.env.step(action)
                self.agent.remember(obs, action, reward, next_obs, done)
                obs = next_obs

                if done:
                    break

    def run_episode(self, episode: int) -> EpisodeStats:
        """Play one episode, replaying a batch after every frame."""
        obs = self.env.reset()
        total_reward = 0.0
        loss = 0.0
        info = {"score": 0, "won": False}
        frames = 0

        for frames in range(1, self.max_frames + 1):
            action = self.agent.act(obs)
            next_obs, reward, done, info = self.env.step(action)
            self.agent.remember(obs, action, reward, next_obs, done)
            loss += self.agent.replay(self.batch_size)
            obs = next_obs
            total_reward += reward

            if done:
                break

        self.total_frames += frames
        return EpisodeStats(
            episode=episode,
            score=int(info["score"]),
            reward=float(total_reward),
            frames=frames,
            epsilon=float(self.agent.epsilon),
            won=bool(info["won"]),
            loss=loss / max(frames, 1),
        )

    def train(self, episodes: int) -> list[EpisodeStats]:
        """Run episodes, checkpointing after each one.

        Args:
            episodes: Number of episodes to train

        Returns:
            Statistics of every episode trained in this call
        """
        results = []
        progress = tqdm(range(episodes))

        for _ in progress:
            if self.checkpoint_client is not None:
                if self.checkpoint_client.apply_remote_restore():
                    self.resume_from(self.checkpoint_client.episode)

            self.current_episode += 1
            stats = self.run_episode(self.current_episode)
            results.append(stats)
            self.history.append(stats)
            self.checkpoint(stats)

            progress.set_postfix(
                score=stats.score, reward=f"{stats.reward:.2f}", eps=f"{stats.epsilon:.3f}"
            )

        return results

    def resume_from(self, episode: int | None):
        """Continue episode numbering after a restored checkpoint."""
        if episode is not None:
            self.current_episode = episode

    def checkpoint(self, stats: EpisodeStats):
        """Persist locally, then hand the same snapshot to the remote service."""
        if self.checkpoint_client is None:
            return

        snapshot = self.agent.serialize()
        self.checkpoint_client.persist(snapshot, episode=stats.episode)
        self.checkpoint_client.send_snapshot(stats, snapshot)
