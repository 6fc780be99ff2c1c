"""
speechfeat v1 Data Types.

Frozen value objects exchanged with the I/O collaborators:

    - Signal: mono float32 samples plus their sample rate (pipeline input)
    - FeatureSet: MFCC matrix, pitch series and voicing series (pipeline output)

Invariants:
    - Arrays held by these types are read-only
    - FeatureSet rows are aligned: mfcc, pitch and voiced share one frame count
"""

from dataclasses import dataclass
from typing import Any

import numpy as np


def _frozen_array(values: Any, dtype: Any) -> np.ndarray:
    """Copy into a contiguous array of `dtype` and mark it read-only."""
    array = np.array(values, dtype=dtype, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Signal:
    """
    A complete, in-memory mono recording.

    Attributes:
        samples: 1-D float32 samples (read-only copy of the input)
        sample_rate: Samples per second (Hz)
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self) -> None:
        samples = _frozen_array(self.samples, np.float32)
        if samples.ndim != 1:
            raise ValueError(f"Signal must be 1-D (mono), got shape {samples.shape}")
        if samples.size == 0:
            raise ValueError("Signal must contain at least one sample")
        if not np.all(np.isfinite(samples)):
            bad = int(np.count_nonzero(~np.isfinite(samples)))
            raise ValueError(f"Signal contains {bad} non-finite sample(s) (NaN or inf)")
        if isinstance(self.sample_rate, bool) or int(self.sample_rate) != self.sample_rate:
            raise ValueError(f"sample_rate must be an integer, got {self.sample_rate!r}")
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        object.__setattr__(self, "samples", samples)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    def __len__(self) -> int:
        return int(self.samples.size)

    @property
    def duration_sec(self) -> float:
        return float(self.samples.size / self.sample_rate)


@dataclass(frozen=True, eq=False)
class FeatureSet:
    """
    Frame-aligned pipeline output.

    Attributes:
        mfcc: (num_frames, n_mfcc) CMVN-normalized cepstral coefficients
        pitch: (num_frames,) pitch estimate per frame in Hz
        voiced: (num_frames,) voiced/unvoiced decision per frame
    """

    mfcc: np.ndarray
    pitch: np.ndarray
    voiced: np.ndarray

    def __post_init__(self) -> None:
        mfcc = _frozen_array(self.mfcc, np.float64)
        pitch = _frozen_array(self.pitch, np.float64)
        voiced = _frozen_array(self.voiced, bool)

        if mfcc.ndim != 2:
            raise ValueError(f"mfcc must be 2-D, got shape {mfcc.shape}")
        if pitch.ndim != 1 or voiced.ndim != 1:
            raise ValueError("pitch and voiced must be 1-D")
        if not (mfcc.shape[0] == pitch.shape[0] == voiced.shape[0]):
            raise ValueError(
                "Outputs are not frame-aligned: "
                f"mfcc={mfcc.shape[0]}, pitch={pitch.shape[0]}, voiced={voiced.shape[0]}"
            )

        object.__setattr__(self, "mfcc", mfcc)
        object.__setattr__(self, "pitch", pitch)
        object.__setattr__(self, "voiced", voiced)

    @property
    def num_frames(self) -> int:
        return int(self.mfcc.shape[0])

    @property
    def n_mfcc(self) -> int:
        return int(self.mfcc.shape[1])

    def frame_times(self, frame_shift: int, sample_rate: int) -> np.ndarray:
        """Start time of each frame in seconds."""
        return np.arange(self.num_frames) * frame_shift / sample_rate

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to nested lists.

        Returns:
            Dictionary with num_frames, n_mfcc, mfcc (list of rows),
            pitch (list of floats) and voiced (list of bools).
        """
        return {
            "num_frames": self.num_frames,
            "n_mfcc": self.n_mfcc,
            "mfcc": self.mfcc.tolist(),
            "pitch": self.pitch.tolist(),
            "voiced": self.voiced.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeatureSet":
        """Rebuild a FeatureSet serialized with to_dict()."""
        mfcc = np.asarray(data["mfcc"], dtype=np.float64)
        if mfcc.size == 0:
            mfcc = mfcc.reshape(0, data.get("n_mfcc", 0))
        return cls(mfcc=mfcc, pitch=data["pitch"], voiced=data["voiced"])
