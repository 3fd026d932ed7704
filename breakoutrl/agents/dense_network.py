import numpy as np

from breakoutrl.training.checkpoint_data import NetworkParameters


def sigmoid(x: np.ndarray) -> np.ndarray:
    return 1.0 / (1.0 + np.exp(-x))


class DenseNetwork:
    """Single-hidden-layer network with a sigmoid hidden layer and a linear output.

    The output layer is unbounded so it can represent Q-values directly.
    Training is plain online SGD on one sample at a time (no momentum,
    no weight decay, no gradient clipping).
    """

    def __init__(
        self,
        input_size: int,
        hidden_size: int,
        output_size: int,
        learning_rate: float = 0.1,
        rng: np.random.Generator | None = None,
    ):
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = output_size
        self.learning_rate = learning_rate

        rng = rng if rng is not None else np.random.default_rng()
        self.weights1 = rng.uniform(-1.0, 1.0, size=(input_size, hidden_size))
        self.weights2 = rng.uniform(-1.0, 1.0, size=(hidden_size, output_size))
        self.bias1 = np.zeros(hidden_size)
        self.bias2 = np.zeros(output_size)

    def _forward(self, x: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        hidden = sigmoid(x @ self.weights1 + self.bias1)
        output = hidden @ self.weights2 + self.bias2
        return hidden, output

    def predict(self, state) -> np.ndarray:
        """Q-value estimate for every output unit."""
        _, output = self._forward(np.asarray(state, dtype=np.float64))
        return output

    def train(self, state, target) -> float:
        """One SGD step towards target. Returns the squared error before the step."""
        x = np.asarray(state, dtype=np.float64)
        target = np.asarray(target, dtype=np.float64)

        hidden, output = self._forward(x)
        output_errors = output - target
        # Uses weights2 before it is updated below
        hidden_errors = (self.weights2 @ output_errors) * hidden * (1.0 - hidden)

        lr = self.learning_rate
        self.weights2 -= lr * np.outer(hidden, output_errors)
        self.bias2 -= lr * output_errors
        self.weights1 -= lr * np.outer(x, hidden_errors)
        self.bias1 -= lr * hidden_errors

        return float(np.sum(output_errors**2))

    def get_parameters(self) -> NetworkParameters:
        return NetworkParameters(
            weights1=self.weights1.copy(),
            weights2=self.weights2.copy(),
            bias1=self.bias1.copy(),
            bias2=self.bias2.copy(),
        )

    def set_parameters(
        self,
        weights1=None,
        weights2=None,
        bias1=None,
        bias2=None,
    ):
        """Copy the given arrays into the network. None leaves a parameter untouched.

        Shapes are fixed at construction; every array is checked before any
        parameter is replaced.

        Raises:
            ValueError: If an array does not match the network's dimensions
        """
        updates = {}
        for name, value in (
            ("weights1", weights1),
            ("weights2", weights2),
            ("bias1", bias1),
            ("bias2", bias2),
        ):
            if value is None:
                continue
            array = np.array(value, dtype=np.float64)
            expected = getattr(self, name).shape
            if array.shape != expected:
                raise ValueError(
                    f"{name} shape {array.shape} does not match network shape {expected}"
                )
            updates[name] = array

        for name, array in updates.items():
            setattr(self, name, array)
