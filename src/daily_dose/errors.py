"""Domain errors. Raised by services and controllers, mapped to HTTP in main."""


class DailyDoseError(Exception):
    """Base class for all domain errors."""


class ConfigurationError(DailyDoseError):
    """Required configuration (the LLM credential) is missing."""


class ComputationError(DailyDoseError):
    """Nutrition request failed: transport, empty response or schema mismatch."""


class ValidationError(DailyDoseError):
    """Bad form input. Never persisted."""


class AuthError(DailyDoseError):
    """Account registration or login failed."""


class DuplicateEmail(AuthError):
    """An account with this email already exists."""


class InvalidCredentials(AuthError):
    """Email/password pair did not match. Does not say which field was wrong."""


class AdminAccessDenied(DailyDoseError):
    """Wrong admin passphrase, or admin operation attempted while locked."""


class PetNotFound(DailyDoseError):
    """No pet with the given id."""
