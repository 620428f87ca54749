"""Exceptions raised at the dispatch boundary."""


class NixMCPError(Exception):
    """Base class for errors reported back to the caller."""


class UnknownOperationError(NixMCPError):
    """Raised when a caller names an operation that does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class UnknownPromptError(NixMCPError):
    """Raised when a caller asks for a prompt that does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown prompt: {name}")
        self.name = name


class InvalidFilterPatternError(NixMCPError):
    """Raised when a log retrieval grep pattern does not compile."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid grep pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
