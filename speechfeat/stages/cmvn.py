"""
Stage 4: Cepstral Mean-Variance Normalization

Responsibilities:
    - Standardize each cepstral coefficient across all frames

Invariants:
    - Population statistics (divisor = number of frames)
    - Each non-constant column has mean 0 and std 1 afterwards
    - Constant columns (e.g. a single-frame signal) become zeros, not NaN
"""

import logging

import numpy as np

from speechfeat import dsp
from speechfeat.contracts import Stage, StageContract, StageContext


logger = logging.getLogger(__name__)


CONTRACT = StageContract(
    name="cmvn",
    requires=frozenset({"mfcc/raw"}),
    produces=frozenset({"mfcc/cmvn"}),
    version="1.0.0",
)


class Normalizer(Stage):
    """Stage 4: mfcc/raw → mfcc/cmvn."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        normalized, constant = dsp.cmvn(ctx.artifacts["mfcc/raw"])
        if constant.any():
            logger.warning(
                "cmvn: %d zero-variance coefficient column(s) %s set to 0",
                int(constant.sum()),
                np.flatnonzero(constant).tolist(),
            )
        return {"mfcc/cmvn": normalized}
