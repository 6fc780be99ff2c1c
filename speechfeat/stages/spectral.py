"""
Stage 3: Spectral Analysis (MFCC)

Responsibilities:
    - Magnitude spectrum of each windowed frame (first n_fft // 2 + 1 bins)
    - Mel filter bank energies (n_mfcc triangular filters, 0 Hz .. Nyquist)
    - Natural log, floored at dsp.LOG_FLOOR
    - Orthonormal DCT-II along the filter axis

Invariants:
    - The filter bank is built once per configuration and never modified
    - Frames are truncated or zero-padded to n_fft samples before the FFT
    - Filter count equals coefficient count, so every DCT output is kept
    - Output is finite for any finite input (silent frames hit the log floor)
"""

import logging

import numpy as np

from speechfeat import dsp
from speechfeat.config import FeatureConfig
from speechfeat.contracts import Stage, StageContract, StageContext


logger = logging.getLogger(__name__)


# =============================================================================
# Stage Contract (LOCKED)
# =============================================================================

CONTRACT = StageContract(
    name="spectral",
    requires=frozenset({"frames/windowed"}),
    produces=frozenset({"spectrum/magnitude", "mfcc/raw"}),
    version="1.0.0",
)


# =============================================================================
# SpectralAnalyzer
# =============================================================================


class SpectralAnalyzer(Stage):
    """
    Stage 3: frames/windowed → spectrum/magnitude, mfcc/raw.

    Attributes:
        filter_bank: Read-only (n_mfcc, n_fft // 2 + 1) mel filter bank
    """

    contract = CONTRACT

    def __init__(self, config: FeatureConfig):
        super().__init__(config)
        self.filter_bank = dsp.mel_filter_bank(
            config.n_mfcc,
            config.n_fft,
            config.sample_rate,
            0.0,
            config.sample_rate / 2,
        )

    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        frames = ctx.artifacts["frames/windowed"]

        magnitudes = dsp.magnitude_spectrum(frames, self.config.n_fft)

        floored = dsp.count_floored(magnitudes, self.filter_bank)
        if floored:
            logger.debug(
                "spectral: %d of %d mel energies floored at %g before log",
                floored,
                magnitudes.shape[0] * self.filter_bank.shape[0],
                dsp.LOG_FLOOR,
            )

        log_mel = dsp.log_mel_energies(magnitudes, self.filter_bank)
        mfcc = dsp.cepstral_coefficients(log_mel, self.config.n_mfcc)

        return {
            "spectrum/magnitude": magnitudes,
            "mfcc/raw": mfcc,
        }
