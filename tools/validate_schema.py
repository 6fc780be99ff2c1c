#!/usr/bin/env python3
"""
speechfeat v1 Document Checker

Standalone utility for checking JSON files written or read by speechfeat:
configuration files (`speechfeat extract --config`) and feature documents
(`speechfeat extract --output`).

Each file is checked in two passes:
    1. JSON schema (config.schema.json or features.schema.json)
    2. Semantic rules the schema cannot express (configuration consistency,
       frame alignment, MFCC row width)

Usage:
    python tools/validate_schema.py [--schema {config,features}] FILE [FILE ...]

Without --schema, a document holding a "features" key is checked as a
feature document and anything else as a configuration.

Example:
    python tools/validate_schema.py out/features.json my_config.json
"""

import argparse
import json
import sys
from pathlib import Path

from speechfeat.config import SCHEMA_PATH as CONFIG_SCHEMA_PATH
from speechfeat.config import ConfigurationError, FeatureConfig, format_schema_errors
from speechfeat.utils import FEATURES_SCHEMA_PATH


SCHEMA_FILES = {
    "config": CONFIG_SCHEMA_PATH,
    "features": FEATURES_SCHEMA_PATH,
}


def load_schema(schema_name: str) -> dict:
    """Load a schema by name."""
    if schema_name not in SCHEMA_FILES:
        raise ValueError(f"Unknown schema: {schema_name}. Valid: {sorted(SCHEMA_FILES)}")
    with open(SCHEMA_FILES[schema_name]) as f:
        return json.load(f)


def validate_document(document: dict, schema: dict) -> list[str]:
    """
    Validate a document against a schema.

    Returns:
        List of "path: message" strings (empty if valid).
    """
    return format_schema_errors(document, schema)


def detect_schema(document: object) -> str:
    if isinstance(document, dict) and "features" in document:
        return "features"
    return "config"


def _config_problems(data: dict) -> list[str]:
    try:
        FeatureConfig.from_dict(data)
    except ConfigurationError as e:
        return list(e.problems)
    return []


def check_semantics(schema_name: str, document: dict) -> list[str]:
    """
    Rules beyond the schema. Only meaningful for schema-valid documents.

    Returns:
        List of problems (empty if consistent).
    """
    if schema_name == "config":
        return _config_problems(document)

    problems = [f"config: {p}" for p in _config_problems(document["config"])]

    features = document["features"]
    num_frames = features["num_frames"]
    for key in ("mfcc", "pitch", "voiced"):
        if len(features[key]) != num_frames:
            problems.append(
                f"features.{key}: {len(features[key])} entries, num_frames is {num_frames}"
            )

    widths = {len(row) for row in features["mfcc"]}
    if widths and widths != {features["n_mfcc"]}:
        problems.append(
            f"features.mfcc: row widths {sorted(widths)}, n_mfcc is {features['n_mfcc']}"
        )
    if document["config"].get("n_mfcc") not in (None, features["n_mfcc"]):
        problems.append("features.n_mfcc does not match config.n_mfcc")

    return problems


def check_file(path: Path, schema_name: str | None = None) -> tuple[str, list[str]]:
    """
    Check one JSON file.

    Returns:
        Tuple of (schema name used, list of problems).
    """
    try:
        with open(path) as f:
            document = json.load(f)
    except FileNotFoundError:
        return schema_name or "?", ["file not found"]
    except json.JSONDecodeError as e:
        return schema_name or "?", [f"invalid JSON: {e}"]

    name = schema_name or detect_schema(document)
    errors = validate_document(document, load_schema(name))
    if not errors:
        errors = check_semantics(name, document)
    return name, errors


def main():
    parser = argparse.ArgumentParser(
        description="Check speechfeat configuration files and feature documents"
    )
    parser.add_argument(
        "--schema",
        choices=sorted(SCHEMA_FILES),
        help="Check every file against this schema (default: detect per file)",
    )
    parser.add_argument(
        "json_files",
        nargs="+",
        type=Path,
        metavar="FILE",
        help="JSON file(s) to check",
    )

    args = parser.parse_args()

    failed = 0
    for path in args.json_files:
        name, errors = check_file(path, args.schema)
        if errors:
            failed += 1
            print(f"INVALID ({name}): {path}: {len(errors)} error(s) found:")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"VALID ({name}): {path}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
