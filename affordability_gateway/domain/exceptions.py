"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Mandatory numeric input is missing, non-finite or out of range"""

    pass


class NonConvergenceError(DomainException):
    """Bracket fixed-point iteration exhausted its budget without settling"""

    pass
