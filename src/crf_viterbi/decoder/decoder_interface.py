from typing import Protocol
import torch
from ..transition_model.transition_model_interface import TransitionModel


"""Takes emission & transition scores, returns the best tag sequence (Viterbi, beam search, etc.)."""
class Decoder(Protocol):
    def decode(self, transitions: TransitionModel, emissions: torch.Tensor,
               initial: torch.Tensor) -> tuple[float, list[int]]:
        """
        Args:
            transitions: transition model over T+2 tags
            emissions: (L, T+2) per-step emission scores; tensor, numpy array or nested list
            initial: (T+2,) best path score per tag before the first step; same accepted types
        Returns:
            (path score, list of L real tags)
        """
        ...
