"""Custom exceptions for runway."""


class RunwayError(Exception):
    """Base exception for runway errors."""
    pass


class ObservableError(RunwayError, TypeError):
    """Raised when an event name, handler or eventify target is unusable."""
    pass


class DefinitionError(RunwayError):
    """Raised when a model or collection definition is invalid."""
    pass


class FieldNameError(DefinitionError):
    """Raised when a field name cannot be installed on an entity."""
    pass


class DispatchDepthError(RunwayError, RecursionError):
    """Raised when nested event dispatch exceeds the configured depth."""

    def __init__(self, depth: int, limit: int, event: str):
        self.depth = depth
        self.limit = limit
        self.event = event
        super().__init__(
            f"Dispatch of '{event}' reached depth {depth} (limit {limit}); "
            f"the object graph probably contains a cycle"
        )


class ConfigurationError(RunwayError):
    """Raised when there's an error in configuration."""
    pass


class CyclicGraphError(RunwayError):
    """Raised when a containment cycle is found while walking a graph."""
    pass
