import logging
from pathlib import Path
import numpy as np
import torch

from ..tags.tag_set import SENTINEL

logger = logging.getLogger(__name__)


class CRFTransitionMatrix:
    """
    (T+2) x (T+2) transition scores for T real tags plus START (index T) and END (index T+1).
    Entry [i][j] is the score of transitioning into tag i from tag j.

    Column END and row START always hold the sentinel so no path can leave END or enter START.
    The matrix is not mutated after construction, so one instance can be shared by
    concurrent decode calls.
    """

    def __init__(self, num_tags: int, seed: int | None = None, sentinel: float = SENTINEL):
        if num_tags < 0:
            raise ValueError(f"num_tags must be >= 0, got {num_tags}")
        n = num_tags + 2

        # untrained weights: uniform [0, 1) from a seeded PCG64 generator
        bitgen = np.random.PCG64(seed=seed)
        rng = np.random.Generator(bitgen)
        W = torch.from_numpy(rng.random((n, n)))

        self._init_from_tensor(W, num_tags, sentinel, enforce_sentinels=True)
        logger.debug(f"Initialized random {n}x{n} transition matrix (seed={seed})")

    def _init_from_tensor(self, W: torch.Tensor, num_tags: int, sentinel: float, enforce_sentinels: bool):
        self.num_tags = num_tags
        self.size = num_tags + 2
        self.start_tag = num_tags
        self.end_tag = num_tags + 1
        self.sentinel = float(sentinel)
        self._W = W.to(torch.float64).clone()
        if enforce_sentinels:
            self._W[:, self.end_tag] = self.sentinel    # nothing leaves END
            self._W[self.start_tag, :] = self.sentinel  # nothing enters START

    @classmethod
    def from_matrix(cls, matrix, enforce_sentinels: bool = True, sentinel: float = SENTINEL):
        """
        Build a transition model from explicit (trained or fixture) scores.
        matrix: square array-like of shape (T+2, T+2), T >= 0
        enforce_sentinels: overwrite column END and row START with the sentinel
        """
        if isinstance(matrix, np.ndarray):
            W = torch.from_numpy(matrix)
        else:
            W = torch.as_tensor(matrix, dtype=torch.float64)

        if W.dim() != 2 or W.shape[0] != W.shape[1]:
            raise ValueError(f"Transition matrix must be square, got shape {tuple(W.shape)}")
        if W.shape[0] < 2:
            raise ValueError(f"Transition matrix needs at least the START and END tags, got shape {tuple(W.shape)}")

        model = cls.__new__(cls)
        model._init_from_tensor(W, W.shape[0] - 2, sentinel, enforce_sentinels)
        return model

    @property
    def matrix(self) -> torch.Tensor:
        return self._W.clone()

    def row(self, tag: int) -> torch.Tensor:
        self._check_tag(tag)
        return self._W[tag].clone()

    def column(self, tag: int) -> torch.Tensor:
        self._check_tag(tag)
        return self._W[:, tag].clone()

    def score(self, next_tag: int, prev_tag: int) -> float:
        self._check_tag(next_tag)
        self._check_tag(prev_tag)
        return float(self._W[next_tag, prev_tag])

    def has_sentinels(self) -> bool:
        end_col = torch.all(self._W[:, self.end_tag] == self.sentinel)
        start_row = torch.all(self._W[self.start_tag, :] == self.sentinel)
        return bool(end_col and start_row)

    def _check_tag(self, tag: int):
        if not 0 <= tag < self.size:
            raise ValueError(f"Tag {tag} out of range [0, {self.size})")

    def save(self, path: str | Path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        torch.save({"transitions": self._W, "sentinel": self.sentinel}, path)
        logger.info(f"Saved {self.size}x{self.size} transition matrix to {path}")

    @classmethod
    def load(cls, path: str | Path, sentinel: float | None = None):
        """
        Load saved scores. The sentinel invariant is re-applied to whatever was stored.
        sentinel: overrides the stored sentinel value when given
        """
        state = torch.load(path, map_location="cpu")
        stored_sentinel = float(state.get("sentinel", SENTINEL))
        if sentinel is not None and float(sentinel) != stored_sentinel:
            logger.warning(f"{path} was saved with sentinel {stored_sentinel}, using {float(sentinel)} instead")
            stored_sentinel = float(sentinel)
        model = cls.from_matrix(state["transitions"], enforce_sentinels=True, sentinel=stored_sentinel)
        logger.info(f"Loaded {model.size}x{model.size} transition matrix from {path}")
        return model

    def __repr__(self):
        return f"CRFTransitionMatrix(num_tags={self.num_tags})"
