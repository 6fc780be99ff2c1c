"""
Stage 2: Windowing

Responsibilities:
    - Multiply every raw frame by the configured analysis window

Invariants:
    - The window vector is computed once, when the stage is constructed
    - Output has the same shape as frames/raw; frames/raw is left untouched
"""

import numpy as np

from speechfeat import dsp
from speechfeat.config import FeatureConfig
from speechfeat.contracts import Stage, StageContract, StageContext


CONTRACT = StageContract(
    name="windowing",
    requires=frozenset({"frames/raw"}),
    produces=frozenset({"frames/windowed"}),
    version="1.0.0",
)


class Windower(Stage):
    """Stage 2: frames/raw → frames/windowed."""

    contract = CONTRACT

    def __init__(self, config: FeatureConfig):
        super().__init__(config)
        self.window = dsp.make_window(config.window_type, config.frame_length)

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        frames = ctx.artifacts["frames/raw"]
        return {"frames/windowed": dsp.apply_window(frames, self.window)}
