"""fluentql argument validation: operator whitelist and arity checks."""
from fluentql.validate.validator import (
    validate_direction,
    validate_operator,
    validate_pagination,
    validate_range,
    validate_scalar,
)

__all__ = [
    "validate_direction",
    "validate_operator",
    "validate_pagination",
    "validate_range",
    "validate_scalar",
]
