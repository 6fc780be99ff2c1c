"""
speechfeat v1 Stage Base Utilities.

Responsibilities:
- StageFailure exception for pipeline control flow
- Error object builder
- InsufficientSamplesError, the one fatal data error in the core

Invariants:
- A failing stage raises before returning any artifact
- Error objects always carry code, message and stage
"""


class StageFailure(Exception):
    """
    Raised when a stage cannot produce its artifacts.

    The orchestrator lets this propagate: no partial result is returned.
    """

    def __init__(self, stage: str, errors: list[dict]):
        self.stage = stage
        self.errors = errors
        messages = "; ".join(e["message"] for e in errors)
        super().__init__(f"Stage '{stage}' failed: {messages}")


class InsufficientSamplesError(StageFailure):
    """Raised by framing when the signal is shorter than one frame."""


def build_error(
    code: str,
    message: str,
    stage: str,
    detail: dict | None = None,
) -> dict:
    """
    Build structured error object.

    Args:
        code: Error code (e.g., "FRAMING_INSUFFICIENT_SAMPLES")
        message: Human-readable error message
        stage: Stage name where error occurred
        detail: Optional additional details

    Returns:
        Structured error dictionary.
    """
    error: dict = {
        "code": code,
        "message": message,
        "stage": stage,
    }
    if detail is not None:
        error["detail"] = detail
    return error
