import pytest
import torch

from crf_viterbi.transition_model.crf_transition_matrix import CRFTransitionMatrix

# B, I, O, <START>, <END>
BIO_TRANSITIONS = [
    [-1.2, -1.1, 1.8, 2.2, -1.4],
    [3.1, 2.0, -0.3, -0.4, -0.5],
    [1.7, -0.2, 1.8, 1.1, -1.1],
    [-0.5, -0.1, -0.9, -1.1, -0.4],
    [1.1, 1.3, 2.1, -0.4, -0.2],
]

BIO_EMISSIONS = [
    [3.7, 1.4, 1.2, -0.1, -1.2],
    [2.6, 4.1, 0.9, -0.7, -2.1],
    [0.2, 0.5, 2.4, -0.4, -0.8],
    [3.6, 0.4, 1.1, -0.2, -0.5],
]


@pytest.fixture
def bio_transitions():
    return CRFTransitionMatrix.from_matrix(BIO_TRANSITIONS, enforce_sentinels=False)


@pytest.fixture
def bio_emissions():
    return torch.tensor(BIO_EMISSIONS, dtype=torch.float64)


@pytest.fixture
def bio_initial():
    return torch.tensor([-10_000.0, -10_000.0, -10_000.0, 0.0, -10_000.0], dtype=torch.float64)
