"""
speechfeat v1: Offline Speech Feature Extraction

Pipeline Stages (fixed order):
    1. Framing       (signal → overlapping frames)
    2. Windowing     (Hamming | Hanning taper)
    3. Spectral      (FFT magnitude → mel filter bank → log → DCT-II)
    4. CMVN          (per-coefficient mean/variance normalization)
    5. Pitch         (time-domain autocorrelation, unwindowed frames)
    6. Voicing       (zero-crossing rate + energy thresholds, unwindowed frames)

Invariants:
    - MFCC, pitch and voicing outputs are aligned by frame index
    - Configuration is validated once, before any stage runs
    - No partial results: the pipeline returns all three outputs or raises
    - Same input + same configuration = identical output
"""

__version__ = "1.0.0.dev0"
