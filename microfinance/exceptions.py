"""Custom exception hierarchy for microfinance."""


class MicrofinanceError(Exception):
    """Base exception for all microfinance errors."""


class UnsupportedVariantError(MicrofinanceError):
    """Raised when a repayment cadence or chit fund variant is not recognized."""


class InvalidPeriodRangeError(MicrofinanceError):
    """Raised when a period range starts after it ends."""


class EntityNotFoundError(MicrofinanceError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(MicrofinanceError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(MicrofinanceError):
    """Raised when configuration is invalid or missing."""


class SinkError(MicrofinanceError):
    """Raised when a sink operation fails."""
