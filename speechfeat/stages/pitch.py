"""
Stage 5: Pitch Estimation

Responsibilities:
    - Per-frame fundamental frequency by time-domain autocorrelation

Invariants:
    - Runs on unwindowed frames (frames/raw); windowing would bias the
      autocorrelation towards short lags
    - Searched lags: ceil(sr / max_pitch) <= lag < ceil(sr / min_pitch)
    - Every estimate lies in [sr / (max_lag - 1), sr / min_lag]
"""

import numpy as np

from speechfeat import dsp
from speechfeat.contracts import Stage, StageContract, StageContext


CONTRACT = StageContract(
    name="pitch",
    requires=frozenset({"frames/raw"}),
    produces=frozenset({"series/pitch"}),
    version="1.0.0",
)


class PitchEstimator(Stage):
    """Stage 5: frames/raw → series/pitch."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        frames = ctx.artifacts["frames/raw"]
        sample_rate = self.config.sample_rate
        min_lag = self.config.pitch_min_lag
        max_lag = self.config.pitch_max_lag

        pitch = np.array(
            [dsp.estimate_pitch(frame, sample_rate, min_lag, max_lag) for frame in frames],
            dtype=np.float64,
        )
        return {"series/pitch": pitch}
