class AppError(Exception):
    """Base class for all planner exceptions.

    ``exit_code`` is what a command line entry returns when the error stops it.
    """
    exit_code = 1

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

class SchedulerError(AppError):
    """Raised when the schedule search runs past its node budget."""
    def __init__(self, message: str, *, max_search_nodes: int, nodes_visited: int, week_pair: tuple[int, int]):
        self.max_search_nodes = max_search_nodes
        self.nodes_visited = nodes_visited
        self.week_pair = week_pair
        super().__init__(
            message,
            details={
                "max_search_nodes": max_search_nodes,
                "nodes_visited": nodes_visited,
                "week_pair": list(week_pair),
            },
        )

class CatalogError(AppError):
    """Raised when a catalog file or one of its records cannot be decoded into slots."""
    exit_code = 2

    def __init__(self, message: str, *, path: str | None = None, index: int | None = None, errors: list | None = None):
        self.path = path
        self.index = index
        self.errors = errors or []
        details = {}
        if path is not None:
            details["path"] = path
        if index is not None:
            details["index"] = index
        if self.errors:
            details["errors"] = self.errors
        super().__init__(message, details=details)

class ConfigurationError(AppError):
    """Raised when planner input files or settings are missing or invalid."""
    exit_code = 2

    def __init__(self, message: str, *, source: str | None = None):
        self.source = source
        super().__init__(message, details={"source": source} if source else None)
