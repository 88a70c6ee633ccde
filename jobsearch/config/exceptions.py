"""Configuration exceptions."""

from typing import List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """Raised when configuration or a profile file cannot be loaded.

    Carries every validation problem found plus suggestions, and renders them
    as a numbered list so the CLI can print the exception as-is.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)

    @classmethod
    def from_validation_error(
        cls, message: str, exc: ValidationError, suggestions: Optional[List[str]] = None
    ) -> "ConfigurationError":
        """Turn pydantic validation errors into readable lines.

        Args:
            message: Headline for the error
            exc: The pydantic ValidationError
            suggestions: Hints shown under the error list
        """
        errors = []
        for error in exc.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"]) or "(root)"
            error_type = error["type"]

            if error_type == "missing":
                errors.append(f"Missing required field: {field_path}")
            elif error_type in ("string_type", "int_type", "bool_type", "list_type"):
                expected_type = error_type.replace("_type", "")
                errors.append(
                    f"Invalid type for '{field_path}': expected {expected_type}, "
                    f"got {error.get('input')!r}"
                )
            elif "enum" in error_type or "literal" in error_type:
                errors.append(f"Invalid value for '{field_path}': {error['msg']}")
            else:
                errors.append(f"{field_path}: {error['msg']}")

        return cls(message, errors=errors, suggestions=suggestions)
