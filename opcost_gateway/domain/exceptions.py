"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRolloverError(DomainException):
    """Year rollover requested for a non-consecutive pair of years"""

    pass


class OverlappingTenancyError(DomainException):
    """Two tenancies occupy the same unit on the same day"""

    pass


class SnapshotTooLargeError(DomainException):
    """Property snapshot exceeds the configured unit limit"""

    pass
