"""
speechfeat v1 Voicing Tests

Coverage:
- Zero-crossing rate: strict sign changes, zeros never cross
- Energy as sum of squares
- Strict threshold comparisons
- VoicingClassifier on tone vs noise vs silence
"""

import numpy as np
import pytest

from speechfeat import dsp
from speechfeat.contracts import PIPELINE_VERSION, StageContext
from speechfeat.stages.voicing import VoicingClassifier
from tests.conftest import make_config, make_sine


class TestZeroCrossingRate:

    def test_alternating(self):
        assert dsp.zero_crossing_rate(np.array([1.0, -1.0, 1.0, -1.0])) == pytest.approx(1.0)

    def test_zeros_do_not_cross(self):
        assert dsp.zero_crossing_rate(np.array([1.0, 0.0, -1.0, 0.0, 1.0])) == 0.0

    def test_constant(self):
        assert dsp.zero_crossing_rate(np.full(100, 0.3)) == 0.0

    @pytest.mark.parametrize("frame", [np.array([]), np.array([0.5])])
    def test_short_frame(self, frame):
        assert dsp.zero_crossing_rate(frame) == 0.0

    def test_sine_rate(self):
        """A tone of f Hz crosses zero about 2 f L / sr times in L samples."""
        frame = make_sine(150.0)[:512]
        crossings = dsp.zero_crossing_rate(frame) * 511
        assert abs(crossings - 2 * 150 * 512 / 16000) <= 1.0


class TestEnergy:

    def test_sum_of_squares(self):
        assert dsp.frame_energy(np.array([1.0, -2.0, 3.0])) == pytest.approx(14.0)

    def test_sine_energy(self):
        """0.5-amplitude tone over 512 samples: about 512 * 0.25 / 2."""
        assert dsp.frame_energy(make_sine(150.0)[:512]) == pytest.approx(64.0, rel=0.05)


class TestDecision:

    def test_voiced(self):
        assert dsp.is_voiced(0.05, 10.0, 0.15, 1.0) is True

    def test_high_zcr(self):
        assert dsp.is_voiced(0.5, 10.0, 0.15, 1.0) is False

    def test_low_energy(self):
        assert dsp.is_voiced(0.05, 0.5, 0.15, 1.0) is False

    def test_thresholds_are_strict(self):
        assert dsp.is_voiced(0.15, 10.0, 0.15, 1.0) is False
        assert dsp.is_voiced(0.05, 1.0, 0.15, 1.0) is False


class TestVoicingClassifier:

    def _run(self, config, frames):
        ctx = StageContext(
            config=config,
            artifacts={"frames/raw": frames},
            pipeline_version=PIPELINE_VERSION,
        )
        return VoicingClassifier(config).run(ctx)

    def test_tone_noise_silence(self, config):
        rng = np.random.default_rng(21)
        frames = np.stack(
            [
                make_sine(150.0)[:512],
                rng.uniform(-0.5, 0.5, 512),
                np.zeros(512),
            ]
        )
        produced = self._run(config, frames)

        assert set(produced) == {"series/zcr", "series/energy", "series/voicing"}
        assert produced["series/voicing"].tolist() == [True, False, False]
        assert produced["series/voicing"].dtype == bool
        assert produced["series/zcr"][1] > 0.15
        assert produced["series/energy"][2] == 0.0

    def test_thresholds_from_config(self):
        config = make_config(energy_threshold=100.0)
        produced = self._run(config, make_sine(150.0)[:512][None, :])
        # Energy is about 64, below the raised threshold
        assert produced["series/voicing"].tolist() == [False]
