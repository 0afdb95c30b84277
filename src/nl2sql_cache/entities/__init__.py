"""Domain entities for internal representation.

These are pure dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- No external dependencies
"""

from .cache_entry import CacheEntryEntity
from .execution_result import ExecutionResult
from .validation_result import InputValidation, ValidationResult

__all__ = ["CacheEntryEntity", "ExecutionResult", "InputValidation", "ValidationResult"]
