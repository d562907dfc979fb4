"""Exception hierarchy for r2-tools."""


class R2ToolsError(Exception):
    """Base exception for all r2-tools errors."""

    pass


class ValidationError(R2ToolsError):
    """Raised when caller input fails validation."""

    pass


class ConfigurationError(R2ToolsError):
    """Raised when backend configuration or credentials are missing or invalid."""

    pass


class RemoteListingError(R2ToolsError):
    """Raised when a call to the remote storage API fails."""

    pass
