from typing import Protocol
import torch

"""Each edge between two adjacent tags is scored."""

class TransitionModel(Protocol):
    num_tags: int      # real tags T
    size: int          # T + 2
    start_tag: int     # T
    end_tag: int       # T + 1
    sentinel: float

    def row(self, tag: int) -> torch.Tensor:
        """
        Args:
            tag: tag being transitioned into
        Returns:
            tensor of shape (T+2,), entry j is the score of moving into `tag` from j
        """
        ...

    def score(self, next_tag: int, prev_tag: int) -> float:
        """Score of the transition prev_tag -> next_tag."""
        ...

    @property
    def matrix(self) -> torch.Tensor:
        """Full (T+2, T+2) transition matrix, [i][j] = score into i from j."""
        ...
