import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
import time
import torch
import yaml

from .crf import CRF
from ..tags.tag_set import TagSet, SENTINEL
from ..transition_model.crf_transition_matrix import CRFTransitionMatrix

"""
Decode a stored emission sequence with a CRF transition matrix.
The config names the tag labels, where the transition matrix lives (a random untrained one is
built if it isn't given), the .pt emission tensor of shape (L, T+2) and where to write the result.
"""

@dataclass
class DecodeConfig:
    tags: list[str]
    emissions_path: Path
    out_path: Path
    transitions_path: Path | None = None
    sentinel: float = SENTINEL
    seed: int | None = None

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        with open(config_path, "r") as f:
            cfg = yaml.safe_load(f)
        transitions_path = cfg.get("transitions_path")
        seed = cfg.get("seed")
        return cls(
            tags = list(cfg["tags"]),
            emissions_path = Path(cfg["emissions_path"]),
            out_path = Path(cfg["out_path"]),
            transitions_path = Path(transitions_path) if transitions_path else None,
            sentinel = float(cfg.get("sentinel", SENTINEL)),
            seed = int(seed) if seed is not None else None,
        )


def build_transitions(config: DecodeConfig, tag_set: TagSet, logger) -> CRFTransitionMatrix:
    if config.transitions_path is not None:
        transitions = CRFTransitionMatrix.load(config.transitions_path, sentinel=config.sentinel)
        if transitions.size != tag_set.size:
            raise ValueError(f"{config.transitions_path} holds a {transitions.size}x{transitions.size} matrix, "
                             f"expected {tag_set.size}x{tag_set.size} for tags {tag_set.labels}")
        return transitions

    logger.info(f"No transitions_path given, using untrained transitions (seed={config.seed})")
    return CRFTransitionMatrix(tag_set.num_tags, seed=config.seed, sentinel=config.sentinel)


def crf_decode_main(config_path: str) -> dict:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    logger = logging.getLogger(__name__)

    try:
        config = DecodeConfig.from_yaml(config_path)
    except KeyError as e:
        logger.error(f"tags, emissions_path and out_path need to be specified in decode config: {e}")
        raise

    tag_set = TagSet(config.tags)
    transitions = build_transitions(config, tag_set, logger)
    crf = CRF(transitions, tag_set=tag_set)

    feats = torch.load(config.emissions_path, map_location="cpu")
    logger.info(f"Loaded emissions {tuple(feats.shape)} from {config.emissions_path}")

    score, tags = crf.forward(feats)
    labels = tag_set.decode(tags)
    logger.info(f"Best path score: {score:.4f}")
    logger.info(f"Best path: {labels}")

    result = {
        "score": float(score),
        "tags": [int(t) for t in tags],
        "labels": labels,
    }
    config.out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config.out_path, "w") as f:
        yaml.dump(result, f)
    logger.info(f"Wrote decoded path to {config.out_path}")
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Viterbi-decode an emission sequence with a CRF")
    parser.add_argument("--config", default="configs/decode/bio_crf_decode.yaml")
    args = parser.parse_args()
    start_time = time.perf_counter()
    crf_decode_main(args.config)
    end_time = time.perf_counter()
    elapsed_time = end_time - start_time
    print(f"Decoding executed in {elapsed_time:.6f} seconds")
