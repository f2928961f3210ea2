"""Domain exceptions for the encode job supervisor."""


class DomainException(Exception):
    """Base exception for all domain errors."""
    pass


class ValidationError(DomainException):
    """Raised when job parameters or input paths are invalid."""
    pass


class JobAlreadyRunningError(ValidationError):
    """Raised when a job is requested while another one is active."""
    pass


class ProbeError(DomainException):
    """Raised when ffprobe/ffmpeg inspection fails."""
    pass


class SpawnError(DomainException):
    """Raised when the encode process cannot be started."""
    pass


class StopError(DomainException):
    """Raised when the running encode process cannot be terminated."""
    pass


class InternalLockError(DomainException):
    """Raised when the job state lock cannot be acquired."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid."""
    pass
