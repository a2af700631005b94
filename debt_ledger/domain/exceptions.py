"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Input rejected before any change was applied to the ledger"""

    pass


class MalformedDocumentError(DomainException):
    """Imported ledger document is missing required fields or does not parse"""

    pass


class NotFoundError(DomainException):
    """Referenced ledger entity does not exist"""

    pass


class ClientNotFoundError(NotFoundError):
    """No client with the given id"""

    pass


class DebtNotFoundError(NotFoundError):
    """No debt with the given id"""

    pass


class InstallmentNotFoundError(NotFoundError):
    """No installment with the given id inside the debt"""

    pass


class MessagingError(DomainException):
    """Messaging webhook rejected the message or is unavailable"""

    pass


class PersistenceError(DomainException):
    """Ledger revision could not be saved; the command was not published"""

    pass
