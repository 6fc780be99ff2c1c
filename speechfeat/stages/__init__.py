"""
speechfeat v1 Pipeline Stages

Fixed order:
    1. framing: Split signal into overlapping frames
    2. windowing: Apply Hamming/Hanning window
    3. spectral: Magnitude spectrum, mel filter bank, log, DCT-II
    4. cmvn: Cepstral mean-variance normalization
    5. pitch: Autocorrelation pitch (unwindowed frames)
    6. voicing: ZCR/energy voiced decision (unwindowed frames)
"""
