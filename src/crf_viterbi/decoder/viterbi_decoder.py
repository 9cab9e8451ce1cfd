import logging
import numpy as np
import torch

from ..transition_model.transition_model_interface import TransitionModel

logger = logging.getLogger(__name__)


class DimensionMismatchError(ValueError):
    """Emission or initial-score width doesn't match the transition matrix."""


def as_scores(x, width: int) -> torch.Tensor:
    """Convert lists / numpy arrays / tensors to float64; an empty input becomes (0, width)."""
    if isinstance(x, np.ndarray):
        x = torch.from_numpy(x)
    x = torch.as_tensor(x, dtype=torch.float64)
    if x.numel() == 0 and x.dim() == 1:
        x = x.reshape(0, width)
    return x


def initial_scores(transitions: TransitionModel) -> torch.Tensor:
    """Best path score per tag before any step: sentinel everywhere, 0 at START."""
    init_vvars = torch.full((transitions.size,), transitions.sentinel, dtype=torch.float64)
    init_vvars[transitions.start_tag] = 0.0
    return init_vvars


def check_dimensions(transitions: TransitionModel, emissions: torch.Tensor, initial: torch.Tensor):
    n = transitions.size
    if emissions.dim() != 2:
        raise DimensionMismatchError(f"emissions must be (L, {n}), got shape {tuple(emissions.shape)}")
    if emissions.shape[1] != n:
        raise DimensionMismatchError(f"emissions width {emissions.shape[1]} != transition size {n}")
    if initial.dim() != 1 or initial.shape[0] != n:
        raise DimensionMismatchError(f"initial scores must be ({n},), got shape {tuple(initial.shape)}")
    if transitions.num_tags == 0 and emissions.shape[0] > 0:
        # only START/END exist, so any non-empty path would be made of sentinel tags
        raise DimensionMismatchError(f"no real tags to decode {emissions.shape[0]} steps into")


class ViterbiDecoder:
    """
    Hard-max Viterbi over a linear-chain CRF.

    For every step the best score of reaching each tag is the max over previous tags of
    forward_var + transitions.row(tag); the step's emissions are added afterwards.
    Argmax ties resolve to the lowest tag index, so decoding is reproducible.
    Holds no state between calls.
    """

    @torch.no_grad()
    def decode(self, transitions: TransitionModel, emissions, initial) -> tuple[float, list[int]]:
        feats = as_scores(emissions, transitions.size)
        init_vvars = as_scores(initial, transitions.size)
        check_dimensions(transitions, feats, init_vvars)

        W = transitions.matrix
        backpointers = []
        forward_var = init_vvars

        for i in range(feats.shape[0]):
            # row k of next_tag_var is forward_var + W[k]
            next_tag_var = forward_var.unsqueeze(0) + W
            # torch.max along a dim returns the first maximal index
            viterbivars_t, bptrs_t = torch.max(next_tag_var, dim=1)
            forward_var = viterbivars_t + feats[i]
            backpointers.append(bptrs_t)

        terminal_var = forward_var + W[transitions.end_tag]
        best_tag_id = int(torch.argmax(terminal_var))
        path_score = float(terminal_var[best_tag_id])

        best_path = [best_tag_id]
        for bptrs_t in reversed(backpointers):
            best_tag_id = int(bptrs_t[best_tag_id])
            best_path.append(best_tag_id)

        start = best_path.pop()
        if start != transitions.start_tag:
            logger.warning(f"Backtrace ended on tag {start} instead of START ({transitions.start_tag})")
        best_path.reverse()

        logger.debug(f"Decoded {len(best_path)} steps, score {path_score:.4f}")
        return path_score, best_path

    def __call__(self, transitions: TransitionModel, emissions, initial) -> tuple[float, list[int]]:
        return self.decode(transitions, emissions, initial)


def score_path(transitions: TransitionModel, emissions, tags: list[int], initial) -> float:
    """
    Score of a given tag path under the same rule the decoder maximizes:
    initial[START] + sum_t (W[y_t][y_t-1] + emissions[t][y_t]) + W[END][y_L-1], with y_-1 = START.
    """
    feats = as_scores(emissions, transitions.size)
    init_vvars = as_scores(initial, transitions.size)
    check_dimensions(transitions, feats, init_vvars)
    if len(tags) != feats.shape[0]:
        raise DimensionMismatchError(f"path has {len(tags)} tags but emissions have {feats.shape[0]} steps")

    prev = transitions.start_tag
    total = float(init_vvars[prev])
    for i, tag in enumerate(tags):
        total += transitions.score(tag, prev) + float(feats[i, tag])
        prev = tag
    total += transitions.score(transitions.end_tag, prev)
    return total
