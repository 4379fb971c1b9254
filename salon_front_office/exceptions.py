"""
Salon Front Office Exceptions

Custom exception classes raised by the entity store and the front office services.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError


class SalonError(Exception):
    """Base exception for front office errors"""
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SalonError, ValueError):
    """Exception for rejected input; raised before any store mutation"""
    
    def __init__(self, message: str, field: Optional[str] = None,
                 errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or []
    
    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Wrap a pydantic validation failure"""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", str(exc))
        if field:
            message = f"{field}: {message}"
        return cls(message, field=field, errors=errors)


class NotFoundError(SalonError, LookupError):
    """Exception for update/delete/lookup of an unknown id"""
    
    def __init__(self, collection: str, entity_id: str):
        super().__init__(f"No {collection} entry with id '{entity_id}'")
        self.collection = collection
        self.entity_id = entity_id
