"""
speechfeat v1 Configuration.

Responsibilities:
- Immutable, validated configuration value for the whole pipeline
- Loading configuration files (JSON, validated against config.schema.json)
- Reference values for the command-line interface

Invariants:
- Every field is required; the core never fills in defaults
- Validation happens once, at construction time
- A FeatureConfig is never mutated after construction
"""

import json
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import jsonschema


SCHEMA_PATH = Path(__file__).parent / "schemas" / "config.schema.json"


# =============================================================================
# Errors
# =============================================================================


class ConfigurationError(ValueError):
    """
    Raised when a configuration is internally inconsistent.

    Attributes:
        problems: Every violated constraint, in check order
    """

    def __init__(self, problems: list[str]):
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


# =============================================================================
# Window Type
# =============================================================================


class WindowType(str, Enum):
    """Analysis window applied to frames before spectral analysis."""

    HAMMING = "hamming"
    HANNING = "hanning"

    @classmethod
    def parse(cls, value: "WindowType | str") -> "WindowType":
        """Accept an enum member or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ConfigurationError(
                [f"window_type must be one of {{{valid}}}, got {value!r}"]
            ) from None


# =============================================================================
# FeatureConfig
# =============================================================================


@dataclass(frozen=True)
class FeatureConfig:
    """
    Frozen configuration bundle for one pipeline.

    Attributes:
        frame_length: Samples per frame
        frame_shift: Samples between consecutive frame starts
        window_type: Hamming or Hanning
        sample_rate: Expected signal sample rate (Hz)
        n_mfcc: Number of mel filters, which is also the number of cepstral
            coefficients kept
        n_fft: FFT size; frames are truncated or zero-padded to this length
        min_pitch: Lowest pitch of interest (Hz), sets the largest lag
        max_pitch: Highest pitch of interest (Hz), sets the smallest lag
        zcr_threshold: Frames at or above this zero-crossing rate are unvoiced
        energy_threshold: Frames at or below this energy are unvoiced

    Raises:
        ConfigurationError: If any constraint is violated (all problems are
            reported together).
    """

    frame_length: int
    frame_shift: int
    window_type: WindowType
    sample_rate: int
    n_mfcc: int
    n_fft: int
    min_pitch: float
    max_pitch: float
    zcr_threshold: float
    energy_threshold: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "window_type", WindowType.parse(self.window_type))
        for name, value in _coerce_numbers(self).items():
            object.__setattr__(self, name, value)
        problems = _collect_problems(self)
        if problems:
            raise ConfigurationError(problems)

    @property
    def n_bins(self) -> int:
        """Number of non-negative-frequency FFT bins."""
        return self.n_fft // 2 + 1

    @property
    def pitch_min_lag(self) -> int:
        """Smallest autocorrelation lag searched, ceil(sample_rate / max_pitch)."""
        return math.ceil(self.sample_rate / self.max_pitch)

    @property
    def pitch_max_lag(self) -> int:
        """Exclusive upper bound on searched lags, ceil(sample_rate / min_pitch)."""
        return math.ceil(self.sample_rate / self.min_pitch)

    def replace(self, **changes: Any) -> "FeatureConfig":
        """Return a new validated config with some fields changed."""
        data = self.to_dict()
        data.update(changes)
        return FeatureConfig.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "frame_length": self.frame_length,
            "frame_shift": self.frame_shift,
            "window_type": self.window_type.value,
            "sample_rate": self.sample_rate,
            "n_mfcc": self.n_mfcc,
            "n_fft": self.n_fft,
            "min_pitch": self.min_pitch,
            "max_pitch": self.max_pitch,
            "zcr_threshold": self.zcr_threshold,
            "energy_threshold": self.energy_threshold,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FeatureConfig":
        """
        Build a config from a dictionary.

        Raises:
            ConfigurationError: On missing or unknown keys, or invalid values.
        """
        expected = set(_FIELD_TYPES)
        missing = expected - set(data)
        unknown = set(data) - expected
        problems = []
        if missing:
            problems.append(f"missing fields: {sorted(missing)}")
        if unknown:
            problems.append(f"unknown fields: {sorted(unknown)}")
        if problems:
            raise ConfigurationError(problems)
        return cls(**{name: data[name] for name in _FIELD_TYPES})


_FIELD_TYPES: dict[str, tuple[type, ...]] = {
    "frame_length": (numbers.Integral,),
    "frame_shift": (numbers.Integral,),
    "window_type": (WindowType, str),
    "sample_rate": (numbers.Integral,),
    "n_mfcc": (numbers.Integral,),
    "n_fft": (numbers.Integral,),
    "min_pitch": (numbers.Real,),
    "max_pitch": (numbers.Real,),
    "zcr_threshold": (numbers.Real,),
    "energy_threshold": (numbers.Real,),
}


def _coerce_numbers(config: FeatureConfig) -> dict[str, Any]:
    """
    Plain int/float replacements for numeric fields.

    Integer fields accept any integral number, including integral floats
    such as 512.0 (valid JSON schema integers). Real fields accept any real
    number. Values that do not qualify are left for _collect_problems.
    """
    coerced: dict[str, Any] = {}
    for name, types in _FIELD_TYPES.items():
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            continue
        if types == (numbers.Integral,):
            if isinstance(value, numbers.Integral) or float(value).is_integer():
                coerced[name] = int(value)
        else:
            coerced[name] = float(value)
    return coerced


def _collect_problems(config: FeatureConfig) -> list[str]:
    """Check every constraint and return human-readable violations."""
    problems: list[str] = []

    for name, types in _FIELD_TYPES.items():
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, types):
            problems.append(f"{name} has invalid type {type(value).__name__}")
    if problems:
        # Range checks below assume numeric fields
        return problems

    for name, minimum in (
        ("frame_length", 1),
        ("frame_shift", 1),
        ("sample_rate", 1),
        ("n_mfcc", 1),
        ("n_fft", 2),
    ):
        if getattr(config, name) < minimum:
            problems.append(f"{name} must be >= {minimum}, got {getattr(config, name)}")

    for name in ("zcr_threshold", "energy_threshold"):
        value = getattr(config, name)
        if not math.isfinite(value) or value < 0:
            problems.append(f"{name} must be a finite value >= 0, got {value}")

    if problems:
        return problems

    if config.n_mfcc > config.n_bins:
        problems.append(
            f"n_mfcc ({config.n_mfcc}) exceeds filter-bank width "
            f"n_fft // 2 + 1 ({config.n_bins})"
        )

    nyquist = config.sample_rate / 2
    if not (0 < config.min_pitch < config.max_pitch <= nyquist):
        problems.append(
            f"pitch bounds must satisfy 0 < min_pitch < max_pitch <= {nyquist:g}, "
            f"got min_pitch={config.min_pitch}, max_pitch={config.max_pitch}"
        )
        return problems

    if config.pitch_min_lag >= config.pitch_max_lag:
        problems.append(
            f"pitch lag range is empty: ceil(sample_rate / max_pitch) = {config.pitch_min_lag} "
            f">= ceil(sample_rate / min_pitch) = {config.pitch_max_lag}"
        )

    if config.frame_length < config.pitch_max_lag:
        problems.append(
            f"frame_length ({config.frame_length}) is shorter than the pitch search "
            f"window ceil(sample_rate / min_pitch) = {config.pitch_max_lag}"
        )

    return problems


# =============================================================================
# Loading
# =============================================================================


def format_schema_errors(document: Any, schema: dict) -> list[str]:
    """
    Validate a decoded JSON document against a draft-07 schema.

    Returns:
        List of "path: message" strings (empty if valid).
    """
    validator = jsonschema.Draft7Validator(schema)
    errors = []
    for error in validator.iter_errors(document):
        path = ".".join(str(p) for p in error.absolute_path) or "(root)"
        errors.append(f"{path}: {error.message}")
    return errors


def schema_errors(document: Any, schema_path: Path) -> list[str]:
    """Validate a decoded JSON document against a draft-07 schema file."""
    with open(schema_path) as f:
        schema = json.load(f)
    return format_schema_errors(document, schema)


def validate_config_document(document: Any) -> list[str]:
    """Validate a decoded JSON document against config.schema.json."""
    return schema_errors(document, SCHEMA_PATH)


def load_config(path: Path) -> FeatureConfig:
    """
    Load and validate a configuration file.

    Args:
        path: JSON file holding every FeatureConfig field

    Returns:
        Validated FeatureConfig.

    Raises:
        ConfigurationError: If the file is not valid JSON, does not match
            the schema, or describes an inconsistent configuration.
    """
    try:
        document = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError([f"{path}: invalid JSON ({e})"]) from e

    errors = validate_config_document(document)
    if errors:
        raise ConfigurationError(errors)
    return FeatureConfig.from_dict(document)


# =============================================================================
# Reference Values
# =============================================================================

DEFAULT_FRAME_LENGTH = 512
DEFAULT_FRAME_SHIFT = 256
DEFAULT_WINDOW = WindowType.HAMMING
DEFAULT_SAMPLE_RATE = 16000
DEFAULT_N_MFCC = 13
DEFAULT_N_FFT = 512
DEFAULT_MIN_PITCH = 75.0
DEFAULT_MAX_PITCH = 300.0
DEFAULT_ZCR_THRESHOLD = 0.15
# Sum of squares over a frame of float PCM in [-1, 1]
DEFAULT_ENERGY_THRESHOLD = 1.0


def default_config() -> FeatureConfig:
    """Reference configuration used by the CLI when no file is given."""
    return FeatureConfig(
        frame_length=DEFAULT_FRAME_LENGTH,
        frame_shift=DEFAULT_FRAME_SHIFT,
        window_type=DEFAULT_WINDOW,
        sample_rate=DEFAULT_SAMPLE_RATE,
        n_mfcc=DEFAULT_N_MFCC,
        n_fft=DEFAULT_N_FFT,
        min_pitch=DEFAULT_MIN_PITCH,
        max_pitch=DEFAULT_MAX_PITCH,
        zcr_threshold=DEFAULT_ZCR_THRESHOLD,
        energy_threshold=DEFAULT_ENERGY_THRESHOLD,
    )
