"""
Assessment Errors

Two failure kinds leave the calculators as exceptions:
- InputValidationError: the caller sent a profile outside its documented domain.
- RuleTableError: a recognised value has no row in a rule table (a bug in the tables).

Everything else (inapplicable actions, thin draw history) is returned as data.
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError


class InputValidationError(ValueError):
    """Profile field outside its documented domain."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: ValidationError, model_name: str) -> "InputValidationError":
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        fields = ", ".join(e["field"] or "<root>" for e in errors)
        return cls(f"Invalid {model_name}: {fields}", errors)


class RuleTableError(LookupError):
    """A recognised enum value is missing from a point table."""

    def __init__(self, table: str, key: Any):
        super().__init__(f"No entry for {key!r} in rule table {table}")
        self.table = table
        self.key = key


def lookup(table_name: str, table: Mapping[Any, int], key: Any) -> int:
    """Strict table read: a missing row is a RuleTableError, never zero."""
    try:
        return table[key]
    except KeyError:
        raise RuleTableError(table_name, key) from None
