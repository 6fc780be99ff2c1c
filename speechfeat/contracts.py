"""
speechfeat v1 Stage Contracts

Formal stage contracts and centralized validation for the in-memory pipeline.

This module provides:
- StageContract: Frozen, declarative contract for a stage
- StageContext: Immutable execution context snapshot
- Stage: Abstract base class for all stages
- StageValidator: Centralized input/output validation
- ValidationError: Structured validation failure

Artifact roles (one array each):
    signal/pcm          1-D input samples
    frames/raw          2-D frames, unwindowed
    frames/windowed     2-D frames, windowed
    spectrum/magnitude  2-D magnitude spectrum (frames x n_fft // 2 + 1)
    mfcc/raw            2-D cepstral coefficients before normalization
    mfcc/cmvn           2-D cepstral coefficients after CMVN
    series/pitch        1-D pitch per frame (Hz)
    series/zcr          1-D zero-crossing rate per frame
    series/energy       1-D energy per frame
    series/voicing      1-D voiced flag per frame

INVARIANTS:
- Contracts are frozen and immutable
- Validation happens before and after stage execution
- Stages do NOT validate their own inputs
- Stages do NOT mutate context or earlier artifacts
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

import numpy as np

from speechfeat.config import FeatureConfig


# =============================================================================
# StageContract: Frozen, Declarative
# =============================================================================


@dataclass(frozen=True)
class StageContract:
    """
    Frozen contract declaring what a stage requires and produces.

    Attributes:
        name: Stage identifier (e.g., "framing", "spectral")
        requires: Artifact roles required to run (e.g., {"frames/raw"})
        produces: Artifact roles this stage creates (e.g., {"series/pitch"})
        version: Semantic version for reproducibility (e.g., "1.0.0")
    """
    name: str
    requires: frozenset[str]
    produces: frozenset[str]
    version: str


# =============================================================================
# StageContext: Immutable Execution Snapshot
# =============================================================================


@dataclass(frozen=True)
class StageContext:
    """
    Immutable snapshot of execution context passed to stages.

    Attributes:
        config: Validated pipeline configuration
        artifacts: Read-only arrays produced so far, keyed by role
        pipeline_version: Version of the pipeline for reproducibility

    Rules:
        - Constructed by the pipeline, not stages
        - Read-only (frozen dataclass, read-only mapping of read-only arrays)
    """
    config: FeatureConfig
    artifacts: Mapping[str, np.ndarray]
    pipeline_version: str


# =============================================================================
# Stage: Abstract Base Class
# =============================================================================


class Stage(ABC):
    """
    Abstract base class for all pipeline stages.

    Subclasses must:
        - Define a `contract` class attribute of type StageContract
        - Accept the FeatureConfig in __init__ and precompute anything
          that depends only on configuration
        - Implement `run(ctx)` returning newly created artifacts
    """

    contract: StageContract

    def __init__(self, config: FeatureConfig):
        self.config = config

    @abstractmethod
    def run(self, ctx: StageContext) -> dict[str, np.ndarray]:
        """
        Execute the stage.

        Args:
            ctx: Immutable execution context

        Returns:
            Mapping of role to array for newly created artifacts.
            Must match exactly the roles declared in contract.produces.
        """
        ...


# =============================================================================
# ValidationError: Structured Validation Failure
# =============================================================================


class ValidationError(Exception):
    """
    Raised when stage inputs or outputs break the stage contract.

    Attributes:
        stage: Name of the stage that failed validation
        missing_roles: Roles required (or promised) but not available
        available_roles: Roles that were available
        shape_errors: List of role/shape compatibility errors
    """

    def __init__(
        self,
        stage: str,
        missing_roles: set[str],
        available_roles: set[str],
        shape_errors: list[str],
    ):
        self.stage = stage
        self.missing_roles = missing_roles
        self.available_roles = available_roles
        self.shape_errors = shape_errors

        parts = [f"Validation failed for stage '{stage}'"]
        if missing_roles:
            parts.append(f"Missing roles: {sorted(missing_roles)}")
            parts.append(f"Available roles: {sorted(available_roles)}")
        if shape_errors:
            parts.append(f"Shape errors: {shape_errors}")

        super().__init__("; ".join(parts))


# =============================================================================
# StageValidator: Centralized Validation
# =============================================================================

# Role prefix -> required number of dimensions
ROLE_NDIM = {
    "signal/": 1,
    "frames/": 2,
    "spectrum/": 2,
    "mfcc/": 2,
    "series/": 1,
}


def _shape_errors(artifacts: Mapping[str, np.ndarray]) -> list[str]:
    errors: list[str] = []
    for role in sorted(artifacts):
        array = artifacts[role]
        for prefix, ndim in ROLE_NDIM.items():
            if role.startswith(prefix) and np.ndim(array) != ndim:
                errors.append(
                    f"Role '{role}' has {np.ndim(array)} dimension(s), expected {ndim}"
                )
    return errors


class StageValidator:
    """
    Validates stage inputs and outputs against contracts.

    Input checks:
        1. All required artifact roles exist in available artifacts
        2. Role/shape compatibility (frames/*, spectrum/*, mfcc/* are 2-D;
           signal/*, series/* are 1-D)

    Output checks:
        1. Produced roles equal contract.produces
        2. Role/shape compatibility of produced arrays
    """

    def validate(
        self,
        contract: StageContract,
        available_artifacts: Mapping[str, np.ndarray],
    ) -> None:
        """
        Validate that available artifacts satisfy contract requirements.

        Raises:
            ValidationError: If validation fails
        """
        available_roles = set(available_artifacts)
        missing_roles = set(contract.requires - available_roles)
        shape_errors = _shape_errors(
            {r: available_artifacts[r] for r in contract.requires if r in available_artifacts}
        )

        if missing_roles or shape_errors:
            raise ValidationError(
                stage=contract.name,
                missing_roles=missing_roles,
                available_roles=available_roles,
                shape_errors=shape_errors,
            )

    def validate_outputs(
        self,
        contract: StageContract,
        produced: Mapping[str, np.ndarray],
    ) -> None:
        """
        Validate that a stage produced exactly its declared roles.

        Raises:
            ValidationError: If validation fails
        """
        produced_roles = set(produced)
        missing_roles = set(contract.produces - produced_roles)
        shape_errors = _shape_errors(produced)
        for role in sorted(produced_roles - contract.produces):
            shape_errors.append(f"Role '{role}' is not declared in contract.produces")

        if missing_roles or shape_errors:
            raise ValidationError(
                stage=contract.name,
                missing_roles=missing_roles,
                available_roles=produced_roles,
                shape_errors=shape_errors,
            )


# =============================================================================
# Pipeline Version
# =============================================================================

PIPELINE_VERSION = "1.0.0"
