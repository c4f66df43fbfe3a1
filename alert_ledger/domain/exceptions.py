"""Domain-specific exceptions

Routine alert rejections are returned as values (see models.Rejection);
these exceptions cover configuration faults and collaborator failures.
"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTaxScheduleError(DomainException):
    """Tax brackets are unordered, overlapping or missing the unbounded tier"""

    pass


class InvalidIncomeError(DomainException):
    """Income passed to the tax engine is negative"""

    pass


class OCRServiceError(DomainException):
    """OCR service returned an error or is unavailable"""

    pass


class InvalidImageError(DomainException):
    """Uploaded image payload is not decodable or not an image type"""

    pass


class StorageError(DomainException):
    """Key-value store could not load or save a value"""

    pass


class TransactionNotFoundError(DomainException):
    """No transaction with the given id exists in the ledger"""

    pass
