"""
speechfeat v1 Pipeline Orchestrator

PIPELINE STAGES (FIXED ORDER):

    1. Framing      → speechfeat.stages.framing
    2. Windowing    → speechfeat.stages.windowing
    3. Spectral     → speechfeat.stages.spectral
    4. CMVN         → speechfeat.stages.cmvn
    5. Pitch        → speechfeat.stages.pitch     (unwindowed frames)
    6. Voicing      → speechfeat.stages.voicing   (unwindowed frames)

INVARIANTS:
    - Stages never call each other (only the orchestrator sequences)
    - Stages are constructed once per configuration
    - Inputs are validated before, outputs after, every stage
    - Every artifact is frozen (read-only) as soon as it is produced
    - Pipeline stops on the first failure; no partial result is returned
    - Same input + same configuration = identical output
"""

import importlib
import logging
from types import MappingProxyType

import numpy as np

from speechfeat.config import ConfigurationError, FeatureConfig
from speechfeat.contracts import PIPELINE_VERSION, Stage, StageContext, StageValidator
from speechfeat.types import FeatureSet, Signal


logger = logging.getLogger(__name__)


# Stage registry: (name, module_path, class_name)
STAGE_ORDER = [
    ("framing", "speechfeat.stages.framing", "Framer"),
    ("windowing", "speechfeat.stages.windowing", "Windower"),
    ("spectral", "speechfeat.stages.spectral", "SpectralAnalyzer"),
    ("cmvn", "speechfeat.stages.cmvn", "Normalizer"),
    ("pitch", "speechfeat.stages.pitch", "PitchEstimator"),
    ("voicing", "speechfeat.stages.voicing", "VoicingClassifier"),
]


def load_stages(config: FeatureConfig) -> list[Stage]:
    """Import and construct every stage in STAGE_ORDER."""
    stages = []
    for name, module_path, class_name in STAGE_ORDER:
        module = importlib.import_module(module_path)
        stage = getattr(module, class_name)(config)
        if stage.contract.name != name:
            raise RuntimeError(
                f"Stage {module_path}.{class_name} declares contract "
                f"'{stage.contract.name}', expected '{name}'"
            )
        stages.append(stage)
    return stages


class FeaturePipeline:
    """
    Signal-to-features pipeline bound to one validated configuration.

    Attributes:
        config: The FeatureConfig every stage was built with
        stages: Stage instances in execution order

    Example:
        >>> pipeline = FeaturePipeline(default_config())
        >>> features = pipeline.run(Signal(samples, 16000))
    """

    def __init__(self, config: FeatureConfig):
        if not isinstance(config, FeatureConfig):
            raise TypeError(f"config must be a FeatureConfig, got {type(config).__name__}")
        self.config = config
        self.stages = load_stages(config)
        self._validator = StageValidator()

    def run_stages(self, signal: Signal) -> MappingProxyType:
        """
        Execute every stage and return all artifacts.

        Args:
            signal: Input signal; its rate must equal config.sample_rate

        Returns:
            Read-only mapping of role → read-only array, including the
            intermediate frames and spectrum.

        Raises:
            ConfigurationError: If the signal's sample rate does not match.
            StageFailure: If a stage cannot run (e.g. InsufficientSamplesError).
        """
        if signal.sample_rate != self.config.sample_rate:
            raise ConfigurationError(
                [
                    f"signal sample rate {signal.sample_rate} Hz does not match "
                    f"configured sample_rate {self.config.sample_rate} Hz"
                ]
            )

        artifacts: dict[str, np.ndarray] = {"signal/pcm": signal.samples}

        for stage in self.stages:
            contract = stage.contract
            self._validator.validate(contract, artifacts)

            ctx = StageContext(
                config=self.config,
                artifacts=MappingProxyType(dict(artifacts)),
                pipeline_version=PIPELINE_VERSION,
            )
            logger.debug("Running stage '%s' (v%s)", contract.name, contract.version)
            produced = stage.run(ctx)
            self._validator.validate_outputs(contract, produced)

            for role, array in produced.items():
                array.setflags(write=False)
                artifacts[role] = array

        return MappingProxyType(artifacts)

    def run(self, signal: Signal) -> FeatureSet:
        """
        Extract frame-aligned MFCC, pitch and voicing from a signal.

        Raises:
            ConfigurationError: If the signal's sample rate does not match.
            StageFailure: If a stage cannot run.
        """
        artifacts = self.run_stages(signal)
        features = FeatureSet(
            mfcc=artifacts["mfcc/cmvn"],
            pitch=artifacts["series/pitch"],
            voiced=artifacts["series/voicing"],
        )
        logger.info(
            "Extracted %d frames (%d voiced) from %.3f s of audio",
            features.num_frames,
            int(features.voiced.sum()),
            signal.duration_sec,
        )
        return features


def extract_features(signal: Signal, config: FeatureConfig) -> FeatureSet:
    """One-shot convenience wrapper around FeaturePipeline(config).run(signal)."""
    return FeaturePipeline(config).run(signal)
