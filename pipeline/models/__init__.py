"""
Models package for pipeline models

NOTE: not API schemas
"""

from .core import (
    # Enums
    Provenance,
    GenerationStage,

    # Core data models
    GenerationInput,
    OutputContract,
    ValidationResult,
    RepairOutcome,
    GenerationRecord,
    GenerationResult,
)

__all__ = [
    # Enums
    "Provenance",
    "GenerationStage",

    # Core data models
    "GenerationInput",
    "OutputContract",
    "ValidationResult",
    "RepairOutcome",
    "GenerationRecord",
    "GenerationResult",
]
