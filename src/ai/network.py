"""
Feedforward Controller Network
==============================

The small network that predicts where the ball will cross the left goal
line, and so where the left bat should go.

Theory:
    Input:  [opponent bat y, ball y, ball dx, ball dy] (scaled)
    Output: arrival y as a fraction of court height

    Every layer, the output included, applies tanh, so the prediction is
    bounded in (-1, 1).

The network learns one example at a time by plain stochastic gradient
descent on the squared error:
    Loss = 1/2 * sum((output - target)^2)
    w <- w - learning_rate * dLoss/dw

Inference and training interleave every tick: the bat is steered by the
weights as they are at that moment.
"""

import os
import pickle
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
import torch
import torch.nn as nn

from config import Config
from src.utils.logger import get_logger

logger = get_logger(__name__)

ArrayLike = Union[np.ndarray, Sequence[float], torch.Tensor]


class FeedForwardNetwork(nn.Module):
    """
    Fixed-topology fully connected network with tanh activations.

    Attributes:
        layer_sizes: Widths including input and output, e.g. [4, 4, 4, 4, 4, 1]
        layers (nn.ModuleList): One nn.Linear per consecutive pair of widths
        learning_rate: SGD step size

    Example:
        >>> net = FeedForwardNetwork([4, 4, 4, 4, 4, 1])
        >>> net.feed_forward([0.5, 0.5, 0.1, -0.1])
        array([0.03], dtype=float32)
        >>> net.back_propagate([0.5, 0.5, 0.1, -0.1], [0.4])
    """

    def __init__(
        self,
        layer_sizes: Optional[List[int]] = None,
        learning_rate: Optional[float] = None,
        config: Optional[Config] = None
    ):
        """
        Initialize the network.

        Args:
            layer_sizes: Override config's layer widths
            learning_rate: Override config's learning rate
            config: Configuration object

        Raises:
            ValueError: If the topology has fewer than two layers or a width < 1
        """
        super(FeedForwardNetwork, self).__init__()

        self.config = config or Config()
        self.layer_sizes = list(layer_sizes or self.config.LAYERS)
        self.learning_rate = learning_rate or self.config.LEARNING_RATE

        if len(self.layer_sizes) < 2:
            raise ValueError(f"Network needs an input and an output layer, got {self.layer_sizes}")
        if any(size < 1 for size in self.layer_sizes):
            raise ValueError(f"Every layer needs at least one neuron, got {self.layer_sizes}")

        self.input_size = self.layer_sizes[0]
        self.output_size = self.layer_sizes[-1]

        # Build network layers
        self.layers = nn.ModuleList()
        self._build_network()

        # Initialize weights
        self._init_weights()

        self.optimizer = torch.optim.SGD(self.parameters(), lr=self.learning_rate)

        logger.debug(
            "Network built: "
            + " -> ".join(f"{layer['name']}({layer['neurons']})" for layer in self.get_layer_info())
            + f" | params={self.count_parameters()}"
        )

    def _build_network(self) -> None:
        """Construct the neural network layers."""
        for i in range(len(self.layer_sizes) - 1):
            layer = nn.Linear(self.layer_sizes[i], self.layer_sizes[i + 1])
            self.layers.append(layer)

    def _init_weights(self) -> None:
        """Draw every weight and bias uniformly from [-range, range]."""
        init_range = self.config.WEIGHT_INIT_RANGE
        for layer in self.layers:
            nn.init.uniform_(layer.weight, -init_range, init_range)
            nn.init.uniform_(layer.bias, -init_range, init_range)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through the network.

        Args:
            x: Input tensor of shape (batch_size, input_size) or (input_size,)

        Returns:
            Output tensor with the same leading shape and output_size columns
        """
        for layer in self.layers:
            x = torch.tanh(layer(x))
        return x

    def _as_tensor(self, values: ArrayLike, size: int) -> torch.Tensor:
        if isinstance(values, torch.Tensor):
            tensor = values.to(torch.float32)
        else:
            tensor = torch.as_tensor(np.asarray(values, dtype=np.float32))
        if tensor.shape != (size,):
            raise ValueError(f"Expected {size} values, got shape {tuple(tensor.shape)}")
        return tensor

    def feed_forward(self, inputs: ArrayLike) -> np.ndarray:
        """
        Predict from a single input vector without touching the weights.

        Args:
            inputs: input_size values

        Returns:
            output_size predictions, each in (-1, 1)
        """
        x = self._as_tensor(inputs, self.input_size)
        with torch.no_grad():
            return self.forward(x).numpy()

    def back_propagate(self, inputs: ArrayLike, targets: ArrayLike) -> float:
        """
        One stochastic gradient step on a single example.

        Runs a forward pass, backpropagates the squared error and updates
        every weight and bias once.

        Args:
            inputs: input_size values
            targets: output_size expected outputs

        Returns:
            Loss before the update
        """
        x = self._as_tensor(inputs, self.input_size)
        y = self._as_tensor(targets, self.output_size)

        self.optimizer.zero_grad()
        output = self.forward(x)
        loss = 0.5 * torch.sum((output - y) ** 2)
        loss.backward()
        self.optimizer.step()

        return loss.item()

    def get_layer_info(self) -> List[Dict]:
        """
        Get information about each layer.

        Returns:
            List of dicts with layer metadata
        """
        info = []

        info.append({
            'name': 'Input',
            'neurons': self.input_size,
            'type': 'input'
        })

        for i, layer in enumerate(self.layers[:-1]):
            info.append({
                'name': f'Hidden {i + 1}',
                'neurons': layer.out_features,
                'type': 'hidden'
            })

        info.append({
            'name': 'Output',
            'neurons': self.output_size,
            'type': 'output'
        })

        return info

    def count_parameters(self) -> int:
        """Return total number of trainable parameters."""
        return sum(p.numel() for p in self.parameters() if p.requires_grad)

    def save(self, filepath: str) -> bool:
        """
        Save weights and topology to file.

        Returns:
            True if the save succeeded
        """
        checkpoint: Dict[str, Any] = {
            'state_dict': self.state_dict(),
            'layer_sizes': self.layer_sizes,
            'learning_rate': self.learning_rate,
        }

        try:
            dir_path = os.path.dirname(filepath)
            if dir_path:
                os.makedirs(dir_path, exist_ok=True)
            torch.save(checkpoint, filepath)
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to save network to {filepath}: {e}")
            return False

        logger.info(f"SAVE | {filepath} | params={self.count_parameters()}")
        return True

    def load(self, filepath: str) -> bool:
        """
        Load weights saved by save().

        A missing, unreadable or corrupt file, or a different topology,
        leaves the weights untouched.

        Returns:
            True if weights were loaded
        """
        if not os.path.exists(filepath):
            logger.debug(f"No saved network at {filepath}")
            return False

        try:
            checkpoint = torch.load(filepath, map_location='cpu', weights_only=True)
            saved_sizes = list(checkpoint['layer_sizes'])
            state_dict = checkpoint['state_dict']
        except (OSError, RuntimeError, pickle.UnpicklingError, EOFError,
                IndexError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to load network from {filepath}: {e}")
            return False

        if saved_sizes != self.layer_sizes:
            logger.warning(
                f"Network incompatible: layer mismatch (saved: {saved_sizes}, current: {self.layer_sizes})"
            )
            return False

        self.load_state_dict(state_dict)
        logger.info(f"LOAD | {filepath}")
        return True
