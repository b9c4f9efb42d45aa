# grapeleaf/exceptions.py
"""
Errors raised by the classification pipeline.

Every stage fails fast with one of these and the orchestrator lets them
propagate untouched; only the HTTP layer maps them to responses.
"""


class PipelineError(Exception):
    """Base class for all pipeline failures."""


class DecodeError(PipelineError):
    """Input bytes could not be parsed as an image."""


class ContextError(PipelineError):
    """The decoded image could not be turned into an RGB(A) working surface."""


class ModelLoadError(PipelineError):
    """Model artifact is missing, unloadable, too slow to load, or has the wrong output shape."""


class UnknownClassError(PipelineError):
    """Winning score index has no entry in the disease table."""

    def __init__(self, index: int):
        super().__init__(f"No disease record for class index {index}")
        self.index = index
