from typing import Protocol, Any
import torch

"""
The purpose of the Emission Model is to score how well every tag fits each step of the input.
Produced externally (e.g. a neural feature extractor); the CRF only consumes the scores.
"""

class EmissionModel(Protocol):
    def score(self, x: Any, **kwargs) -> torch.Tensor:
        """
        Args:
            x: one input sequence of length L (tokens, feature frames, ...)
        Returns:
            tensor of shape (L, T+2): one score per step per tag, START/END columns included
        """
        ...
