"""
Custom exceptions for Mixxx to Rekordbox

This module defines all custom exceptions used throughout the exporter.
Every error raised by the package derives from Mixxx2RekordboxError so a
caller only has to catch one type to detect a failed export.
"""

class Mixxx2RekordboxError(Exception):
    """Base exception for all Mixxx to Rekordbox errors"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.filepath = filepath

    def __str__(self):
        parts = [self.message]
        if self.filepath:
            parts.append(f"File: {self.filepath}")
        if self.details:
            parts.append(f"Details: {self.details}")
        return " | ".join(parts)


class ServiceError(Mixxx2RekordboxError):
    """Raised when a component of the export pipeline fails"""

    def __init__(self, service_name: str, message: str, details: str = None, filepath: str = None):
        super().__init__(message, details, filepath)
        self.service_name = service_name

    def __str__(self):
        return f"[{self.service_name}] {super().__str__()}"


class DatabaseError(ServiceError):
    """Raised when the Mixxx database cannot be opened or read"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__("Database", message, details, filepath)


class ExtractionError(ServiceError):
    """Raised when a library query fails"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__("Extraction", message, details, filepath)


class GenerationError(ServiceError):
    """Raised when the Rekordbox XML document cannot be assembled"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__("XmlGenerator", message, details, filepath)


class ValidationError(ServiceError):
    """Raised when export parameters fail validation"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__("Validation", message, details, filepath)


class ExportError(ServiceError):
    """Raised when the exported document cannot be written"""

    def __init__(self, message: str, details: str = None, filepath: str = None):
        super().__init__("Export", message, details, filepath)
