"""
Exception hierarchy for PageScout.

Most failures in this package are recovered locally (a malformed href is
skipped, a tab that will not click is skipped). The exceptions below are the
ones that cross module boundaries.
"""


class PageScoutError(Exception):
    """Base exception for all PageScout errors"""
    pass


class InteractionError(PageScoutError):
    """Raised by a page control when an element cannot be interacted with"""
    pass


class PageBusyError(PageScoutError):
    """Raised when a second reveal pass is started on a page that is already in use"""
    pass


class ConfigError(PageScoutError):
    """Raised when a configuration file cannot be read or validated"""
    pass


class InspectorNotInitializedError(PageScoutError, RuntimeError):
    """Raised when the inspector is used before initialize()"""
    pass
