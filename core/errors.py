"""
Runner Errors
=============
Exceptions raised by discovery and configuration.

Test failures are not exceptions: they are recorded on the SuiteRecord
and decide the exit code.
"""


class SuiteRunnerError(Exception):
    """Base class for every error the runner raises."""


class DiscoveryError(SuiteRunnerError):
    """The root directory could not be listed."""


class ConfigError(SuiteRunnerError, ValueError):
    """Configuration file is unreadable or holds invalid values."""
