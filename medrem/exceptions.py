class MedremError(Exception):
    """Base class for medicine reminder errors"""


class ReminderValidationError(MedremError, ValueError):
    """Raised when reminder input cannot be expanded"""


class OCRError(MedremError):
    """Raised when text extraction from an image fails"""


class DrugLookupError(MedremError):
    """Raised when no drug label could be retrieved"""
