"""
Exceptions raised by the seam carving engine.

All of them derive from ValueError, so callers that only care about
"bad input" can keep catching that.
"""

import torch


class SeamCarvingError(ValueError):
    """Base class for seam carving failures."""


class InvalidReductionAmountError(SeamCarvingError):
    """Requested reduction is negative or larger than the dimension.

    The untouched input image is attached as ``image``.
    """

    def __init__(self, requested: int, available: int, image: torch.Tensor,
                 dimension: str = 'height'):
        super().__init__(
            f"Cannot resize image of {dimension} {available} by {requested} pixels")
        self.requested = requested
        self.available = available
        self.image = image
        self.dimension = dimension


class DimensionMismatchError(SeamCarvingError):
    """A seam or energy field does not fit the image it is applied to."""


class EmptyInputError(SeamCarvingError):
    """Zero-area image or energy field."""
