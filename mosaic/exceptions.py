"""
Exception hierarchy for mosaic-evolution.

Contract violations indicate caller misuse (mismatched buffer lengths,
asking for an elite of an empty island) and are raised immediately rather
than producing a partial result.
"""


class MosaicError(Exception):
    """Base for all mosaic exceptions."""

    pass


class ContractViolation(MosaicError):
    """A caller broke a precondition of the evolutionary core."""

    pass


class GenomeLengthError(ContractViolation, ValueError):
    """Two buffers that must have equal length do not."""

    def __init__(self, expected: int, actual: int, operation: str = "operation"):
        self.expected = expected
        self.actual = actual
        self.operation = operation
        super().__init__(
            f"{operation} requires equal buffer lengths (expected {expected}, got {actual})"
        )


class EmptyPopulationError(ContractViolation, IndexError):
    """An elite or worst index was requested from an empty collection."""

    pass


__all__ = [
    "MosaicError",
    "ContractViolation",
    "GenomeLengthError",
    "EmptyPopulationError",
]
