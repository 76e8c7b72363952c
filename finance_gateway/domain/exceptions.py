"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInstallmentPlanError(DomainException):
    """Installment count or date range is out of bounds"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ProfileNotFoundError(DomainException):
    """Owner has no financial profile"""

    pass


class BenefitPaymentRejectedError(DomainException):
    """Benefit payment could not be applied; carries the ledger result"""

    def __init__(self, result):
        super().__init__(result.message)
        self.result = result


class InvalidProfileDataError(DomainException):
    """Stored profile data cannot be read as domain records"""

    pass
