"""Exceptions raised by the cortex graph."""


class CortexError(Exception):
    """Base class for neuralcore errors."""


class EdgeError(CortexError):
    """An edge could not be added to the graph."""


class UnknownEndpointError(EdgeError):
    """Edge source or target is not a node in the graph."""

    def __init__(self, source: str, target: str, missing: list[str]):
        self.source = source
        self.target = target
        self.missing = missing
        super().__init__(
            f"Cannot add edge {source} -> {target}: unknown node(s) {', '.join(missing)}"
        )


class UnknownAttractorError(CortexError):
    """An attractor rule links to an attractor node the graph does not have."""

    def __init__(self, names: list[str]):
        self.names = names
        super().__init__(f"Attractor rules target unknown attractor(s): {', '.join(names)}")
