"""
Stage 6: Voicing Classification

Responsibilities:
    - Zero-crossing rate and energy per unwindowed frame
    - Voiced iff zcr < zcr_threshold and energy > energy_threshold

Invariants:
    - Thresholds come from configuration only; nothing is learned from data
    - series/zcr, series/energy and series/voicing have one value per frame
"""

import numpy as np

from speechfeat import dsp
from speechfeat.contracts import Stage, StageContract, StageContext


CONTRACT = StageContract(
    name="voicing",
    requires=frozenset({"frames/raw"}),
    produces=frozenset({"series/zcr", "series/energy", "series/voicing"}),
    version="1.0.0",
)


class VoicingClassifier(Stage):
    """Stage 6: frames/raw → series/zcr, series/energy, series/voicing."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        frames = ctx.artifacts["frames/raw"]

        zcr = np.array([dsp.zero_crossing_rate(frame) for frame in frames], dtype=np.float64)
        energy = np.array([dsp.frame_energy(frame) for frame in frames], dtype=np.float64)
        voiced = np.array(
            [
                dsp.is_voiced(z, e, self.config.zcr_threshold, self.config.energy_threshold)
                for z, e in zip(zcr, energy)
            ],
            dtype=bool,
        )

        return {
            "series/zcr": zcr,
            "series/energy": energy,
            "series/voicing": voiced,
        }
