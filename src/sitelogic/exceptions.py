"""Custom exceptions for sitelogic."""


class SitelogicError(Exception):
    """Base exception for all sitelogic errors."""

    pass


class ValidationError(SitelogicError):
    """Raised when validation fails."""

    pass


class CircularDependencyError(ValidationError):
    """Raised when a trade dependency cycle is detected."""

    pass


class ParseError(SitelogicError):
    """Raised when YAML parsing fails."""

    pass


class ConfigError(SitelogicError):
    """Raised when a configuration file is missing or invalid."""

    pass
