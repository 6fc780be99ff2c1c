"""
speechfeat v1 Configuration Tests

Coverage:
- Valid configuration construction and derived values
- Every inconsistency is fatal at construction time
- Immutability (frozen dataclass)
- Dictionary and JSON file round trips, schema validation
"""

import json
from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from speechfeat.config import (
    ConfigurationError,
    FeatureConfig,
    WindowType,
    default_config,
    load_config,
    validate_config_document,
)
from tests.conftest import make_config


# =============================================================================
# Construction
# =============================================================================


class TestConstruction:
    """Valid configurations and derived values."""

    def test_reference_config_is_valid(self):
        """default_config() builds without error."""
        config = default_config()
        assert config.frame_length == 512
        assert config.frame_shift == 256
        assert config.window_type is WindowType.HAMMING
        assert config.n_mfcc == 13

    def test_pitch_lags_are_rounded_up(self, config):
        """min_lag = ceil(sr / max_pitch), max_lag = ceil(sr / min_pitch)."""
        assert config.pitch_min_lag == 54
        assert config.pitch_max_lag == 214

    def test_n_bins(self, config):
        assert config.n_bins == 257

    def test_window_type_parsed_from_string(self):
        """Window type accepts case-insensitive names."""
        config = make_config(window_type="Hanning")
        assert config.window_type is WindowType.HANNING

    def test_unknown_window_type_rejected(self):
        with pytest.raises(ConfigurationError, match="window_type"):
            make_config(window_type="blackman")

    @pytest.mark.parametrize("value", [np.int64(1024), np.int32(1024), 1024.0])
    def test_integral_numbers_coerced_to_int(self, value):
        config = make_config(frame_length=value)
        assert config.frame_length == 1024
        assert type(config.frame_length) is int

    def test_real_numbers_coerced_to_float(self):
        config = make_config(min_pitch=np.float32(80.0), energy_threshold=2)
        assert type(config.min_pitch) is float
        assert type(config.energy_threshold) is float
        assert config == make_config(min_pitch=80.0, energy_threshold=2.0)

    def test_replace_returns_new_validated_config(self, config):
        """replace() leaves the original untouched."""
        other = config.replace(window_type="hanning", frame_shift=128)
        assert other.window_type is WindowType.HANNING
        assert other.frame_shift == 128
        assert config.window_type is WindowType.HAMMING
        assert config.frame_shift == 256


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """Inconsistent configurations are fatal."""

    @pytest.mark.parametrize(
        "overrides, fragment",
        [
            ({"frame_length": 0}, "frame_length"),
            ({"frame_shift": 0}, "frame_shift"),
            ({"n_mfcc": 0}, "n_mfcc"),
            ({"n_fft": 1}, "n_fft"),
            ({"sample_rate": 0}, "sample_rate"),
            ({"zcr_threshold": -0.1}, "zcr_threshold"),
            ({"energy_threshold": float("nan")}, "energy_threshold"),
        ],
    )
    def test_out_of_range_values(self, overrides, fragment):
        with pytest.raises(ConfigurationError, match=fragment):
            make_config(**overrides)

    def test_n_mfcc_wider_than_filter_bank(self):
        """n_mfcc cannot exceed n_fft // 2 + 1."""
        with pytest.raises(ConfigurationError, match="filter-bank width"):
            make_config(n_fft=16, n_mfcc=10)

    def test_min_pitch_not_below_max_pitch(self):
        with pytest.raises(ConfigurationError, match="pitch bounds"):
            make_config(min_pitch=300.0, max_pitch=75.0)

    def test_max_pitch_above_nyquist(self):
        with pytest.raises(ConfigurationError, match="pitch bounds"):
            make_config(max_pitch=9000.0)

    def test_frame_shorter_than_pitch_window(self):
        """frame_length must cover ceil(sr / min_pitch) samples."""
        with pytest.raises(ConfigurationError, match="pitch search"):
            make_config(frame_length=200)

    def test_empty_lag_range(self):
        """Pitch bounds so close that no integer lag is searched."""
        with pytest.raises(ConfigurationError, match="lag range is empty"):
            make_config(min_pitch=299.0, max_pitch=300.0)

    def test_fractional_float_is_not_an_integer(self):
        with pytest.raises(ConfigurationError, match="frame_length has invalid type float"):
            make_config(frame_length=512.5)

    def test_bool_is_not_an_integer(self):
        with pytest.raises(ConfigurationError, match="invalid type"):
            make_config(frame_shift=True)

    def test_all_problems_reported_together(self):
        """One error lists every violated constraint."""
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(frame_length=0, frame_shift=0)
        assert len(exc_info.value.problems) == 2

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            make_config(frame_shift=-1)


# =============================================================================
# Immutability
# =============================================================================


class TestImmutability:

    def test_config_is_frozen(self, config):
        with pytest.raises(FrozenInstanceError):
            config.frame_length = 1024  # type: ignore[misc]

    def test_config_is_hashable(self, config):
        assert hash(config) == hash(make_config())


# =============================================================================
# Serialization and Loading
# =============================================================================


class TestLoading:

    def test_dict_round_trip(self, config):
        assert FeatureConfig.from_dict(config.to_dict()) == config

    def test_from_dict_missing_field(self, config):
        data = config.to_dict()
        del data["n_fft"]
        with pytest.raises(ConfigurationError, match="missing fields"):
            FeatureConfig.from_dict(data)

    def test_from_dict_unknown_field(self, config):
        data = config.to_dict()
        data["pre_emphasis"] = 0.97
        with pytest.raises(ConfigurationError, match="unknown fields"):
            FeatureConfig.from_dict(data)

    def test_load_config_file(self, tmp_path, config):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(config.to_dict()))
        assert load_config(path) == config

    def test_load_config_rejects_schema_violation(self, tmp_path, config):
        """A string where a number belongs fails schema validation."""
        data = config.to_dict()
        data["frame_length"] = "512"
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ConfigurationError, match="frame_length"):
            load_config(path)

    def test_load_config_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="invalid JSON"):
            load_config(path)

    def test_load_config_rejects_inconsistent_values(self, tmp_path, config):
        """Schema-valid but inconsistent values still fail."""
        data = config.to_dict()
        data["frame_length"] = 100
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ConfigurationError, match="pitch search"):
            load_config(path)

    def test_reference_config_matches_schema(self):
        assert validate_config_document(default_config().to_dict()) == []

    @pytest.mark.parametrize("spelling", ["Hamming", "HANNING", " hanning "])
    def test_load_config_window_type_any_case(self, tmp_path, config, spelling):
        """Config files use the same case-insensitive window names as the API."""
        data = config.to_dict()
        data["window_type"] = spelling
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        assert load_config(path).window_type is WindowType.parse(spelling)

    def test_load_config_rejects_unknown_window(self, tmp_path, config):
        data = config.to_dict()
        data["window_type"] = "blackman"
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        with pytest.raises(ConfigurationError, match="window_type"):
            load_config(path)

    def test_load_config_integral_float(self, tmp_path, config):
        """512.0 is an integer under the JSON schema and is loaded as 512."""
        data = config.to_dict()
        data["frame_length"] = 512.0
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data))
        loaded = load_config(path)
        assert loaded == config
        assert type(loaded.frame_length) is int
