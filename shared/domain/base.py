"""
Base Domain Classes

Building blocks shared by every bounded context:
- ValueObject: Immutable objects compared by value
- DomainError: Root of the business-rule exceptions raised by domain code
"""

from abc import ABC
from dataclasses import dataclass


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class DomainError(Exception):
    """
    Base class for business-rule violations

    Domain code raises subclasses of this error; the API layer
    translates them into validation responses.
    """

    default_message = "Business rule violated"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
