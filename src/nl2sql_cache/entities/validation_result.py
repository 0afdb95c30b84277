"""Guardrail validation results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a SQL syntax/policy check.

    Attributes:
        is_valid: True iff ``errors`` is empty
        errors: Violations, in the order the rules ran
        warnings: Advisory notes that never affect validity
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class InputValidation:
    """Outcome of a single pass/fail guard with one reason."""

    is_valid: bool
    error: str | None = None
