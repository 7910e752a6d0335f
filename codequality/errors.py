"""
Exception hierarchy for code model construction.

Resolution misses are never represented here: an unresolved reference
is a legitimate external dependency and is handled by omission.
"""


class CodeQualityError(Exception):
    """Base class for all errors raised by this package."""


class ModelBuildError(CodeQualityError):
    """
    The skeleton or member stage failed and the build was aborted.

    No partial module is published when this is raised.
    """


class ConfigurationError(CodeQualityError, ValueError):
    """A configuration value is missing or out of range."""
