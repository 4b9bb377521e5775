"""Domain exceptions for the upload queue."""


class DomainException(Exception):
    """Base exception for all domain errors."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration or command line input is invalid."""
    pass


class ConnectivityError(DomainException):
    """Raised when nothing is listening at the worker endpoint."""
    pass


class RemoteCallError(DomainException):
    """Raised when the worker was reached but the call failed."""
    pass


class WorkerUnavailableError(DomainException):
    """Raised when the worker could not be reached or started."""
    pass


class SpawnError(DomainException):
    """Raised when a background worker process cannot be started."""
    pass


class UploadError(DomainException):
    """Raised when file upload fails."""
    pass
