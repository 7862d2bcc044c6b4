"""Exception hierarchy for the print tracker.

    DomainError (base)
    ├── ValidationError            - bad input shape/range (400)
    │   ├── InvalidDimensions
    │   ├── InvalidQuantity
    │   ├── InvalidRate
    │   ├── UnsupportedMachineType
    │   └── MissingFields
    ├── BusinessRuleViolation      - well-formed input the rules reject (400/409)
    │   ├── NoMachineAssigned
    │   ├── IncompatibleJobType
    │   └── NoActivePricing
    ├── NotFoundError              - (404)
    ├── AuthenticationError        - (401)
    ├── AuthorizationError         - (403)
    ├── SecurityGateError          - lockout/block/throttle, logged as security events
    │   ├── AccountLockedError
    │   ├── RateLimitedError
    │   └── ClientBlockedError
    └── DataAccessError            - persistence failures
        ├── ConnectionFailure      - transient, retried with backoff
        └── ConstraintViolation    - never retried
            ├── DuplicateKeyError
            └── MissingReferenceError
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.field = field


class InvalidDimensions(ValidationError):
    pass


class InvalidQuantity(ValidationError):
    pass


class InvalidRate(ValidationError):
    pass


class UnsupportedMachineType(ValidationError):
    pass


class MissingFields(ValidationError):
    pass


class BusinessRuleViolation(DomainError):
    """Raised when a well-formed request is not allowed by the shop rules."""


class NoMachineAssigned(BusinessRuleViolation):
    pass


class IncompatibleJobType(BusinessRuleViolation):
    pass


class NoActivePricing(BusinessRuleViolation):
    pass


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class SecurityGateError(DomainError):
    """Lockout, block or throttle rejection. Never an application error."""


class AccountLockedError(SecurityGateError):
    def __init__(self, username: str, minutes_remaining: int):
        super().__init__(
            "Account is temporarily locked due to too many failed login attempts. "
            f"Please try again in {minutes_remaining} minutes.",
            {"username": username, "minutes_remaining": minutes_remaining},
        )
        self.username = username
        self.minutes_remaining = minutes_remaining


class RateLimitedError(SecurityGateError):
    def __init__(self, retry_after: int):
        super().__init__("Too many requests. Please try again later.", {"retry_after": retry_after})
        self.retry_after = retry_after


class ClientBlockedError(SecurityGateError):
    def __init__(self, identifier: str, retry_after: int):
        super().__init__("Too many requests. Please try again later.", {"retry_after": retry_after})
        self.identifier = identifier
        self.retry_after = retry_after


class DataAccessError(DomainError):
    """Raised when the database cannot complete an operation."""


class ConnectionFailure(DataAccessError):
    pass


class ConstraintViolation(DataAccessError):
    pass


class DuplicateKeyError(ConstraintViolation):
    pass


class MissingReferenceError(ConstraintViolation):
    pass
