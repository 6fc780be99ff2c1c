"""
Stage 1: Framing

Responsibilities:
    - Split the input signal into overlapping fixed-length frames

Invariants:
    - num_frames = 1 + (len(signal) - frame_length) // frame_shift
    - Row i is a verbatim copy of signal[i * frame_shift : i * frame_shift + frame_length]
    - A signal shorter than one frame is fatal (InsufficientSamplesError)
"""

import numpy as np

from speechfeat import dsp
from speechfeat.contracts import Stage, StageContract, StageContext
from speechfeat.stages.base import InsufficientSamplesError, build_error


# =============================================================================
# Stage Contract (LOCKED)
# =============================================================================

CONTRACT = StageContract(
    name="framing",
    requires=frozenset({"signal/pcm"}),
    produces=frozenset({"frames/raw"}),
    version="1.0.0",
)


# =============================================================================
# Framer
# =============================================================================


class Framer(Stage):
    """Stage 1: signal/pcm → frames/raw."""

    contract = CONTRACT

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        samples = ctx.artifacts["signal/pcm"]
        frame_length = self.config.frame_length

        if len(samples) < frame_length:
            error = build_error(
                code="FRAMING_INSUFFICIENT_SAMPLES",
                message=(
                    f"signal has {len(samples)} samples, "
                    f"at least frame_length={frame_length} required"
                ),
                stage=self.contract.name,
                detail={"num_samples": int(len(samples)), "frame_length": frame_length},
            )
            raise InsufficientSamplesError(self.contract.name, [error])

        frames = dsp.frame_signal(samples, frame_length, self.config.frame_shift)
        return {"frames/raw": frames}
