from dataclasses import dataclass, field
from typing import Any
import torch

from ..emission_model.emission_model_interface import EmissionModel
from ..transition_model.transition_model_interface import TransitionModel
from ..decoder.decoder_interface import Decoder
from ..decoder.viterbi_decoder import ViterbiDecoder, initial_scores
from ..tags.tag_set import TagSet


@dataclass(kw_only=True)
class DecodedPath:
    score: float
    tags: list[int]
    labels: list[str] = field(default_factory=list)


class CRF:
    def __init__(self, transition: TransitionModel,
                       emission: EmissionModel | None = None,
                       decoder: Decoder | None = None,
                       tag_set: TagSet | None = None):
        if tag_set is not None and tag_set.size != transition.size:
            raise ValueError(f"Tag set has {tag_set.size} tags but transition matrix has {transition.size}")
        self.transition = transition
        self.emission = emission
        self.decoder = decoder or ViterbiDecoder()
        self.tag_set = tag_set

    def initial_scores(self) -> torch.Tensor:
        return initial_scores(self.transition)

    def forward(self, feats, init_vvars=None) -> tuple[float, list[int]]:
        """Decode precomputed emission scores (L, T+2)."""
        if init_vvars is None:
            init_vvars = self.initial_scores()
        return self.decoder.decode(self.transition, feats, init_vvars)

    def run(self, x: Any) -> DecodedPath:
        if self.emission is None:
            raise ValueError("CRF.run needs an emission model; use forward() for precomputed scores")

        # Score nodes
        feats = self.emission.score(x)

        # Decode path
        score, tags = self.forward(feats)
        labels = self.tag_set.decode(tags) if self.tag_set is not None else []
        return DecodedPath(score=score, tags=tags, labels=labels)
