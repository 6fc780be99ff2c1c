"""
speechfeat v1 Utilities - Shared helper functions.

Responsibilities:
- Deterministic JSON serialization
- Feature document assembly and validation (features.schema.json)
"""

import json
from pathlib import Path
from typing import Any, Mapping

from speechfeat.config import FeatureConfig, schema_errors
from speechfeat.types import FeatureSet


FEATURES_SCHEMA_PATH = Path(__file__).parent / "schemas" / "features.schema.json"


def serialize_json(data: Mapping[str, Any]) -> str:
    """
    Serialize dictionary to JSON deterministically.

    Returns:
        JSON string with sorted keys, 2-space indent, trailing newline.
    """
    return json.dumps(data, indent=2, sort_keys=True, allow_nan=False) + "\n"


def build_feature_document(
    config: FeatureConfig,
    features: FeatureSet,
    input_path: Path,
    num_samples: int,
    source_sample_rate: int,
) -> dict[str, Any]:
    """
    Assemble the JSON document written by `speechfeat extract`.

    Returns:
        {"config": ..., "input": ..., "features": ...}
    """
    return {
        "config": config.to_dict(),
        "input": {
            "path": str(input_path),
            "sample_rate": config.sample_rate,
            "source_sample_rate": int(source_sample_rate),
            "num_samples": int(num_samples),
        },
        "features": features.to_dict(),
    }


def validate_feature_document(document: Any) -> list[str]:
    """
    Validate a feature document against features.schema.json.

    Returns:
        List of error messages (empty if valid).
    """
    return schema_errors(document, FEATURES_SCHEMA_PATH)
