from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationError:
    error_type: str  # "connection", "track_flow", "geometry", "straight_length", "open_shape", "collision", "parse_error"
    message: str
    piece_indices: list[int] = field(default_factory=list)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(is_valid=True)

    @classmethod
    def invalid(cls, errors: list[ValidationError]) -> "ValidationResult":
        return cls(is_valid=False, errors=errors)

    @classmethod
    def from_errors(cls, errors: list[ValidationError]) -> "ValidationResult":
        if errors:
            return cls.invalid(errors)
        return cls.valid()

    @property
    def messages(self) -> List[str]:
        """Plain error strings, ready to show to a user."""
        return [e.message for e in self.errors]

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "errors": self.messages}
