"""Small tensor helpers shared by the carving modules."""

from typing import Tuple

import torch


def image_size(image: torch.Tensor) -> Tuple[int, int]:
    """Return (H, W) of an image tensor shaped (C, H, W) or (H, W)."""
    if image.dim() not in (2, 3):
        raise ValueError(f"Expected image of shape (C, H, W) or (H, W), "
                         f"got {tuple(image.shape)}")
    return image.shape[-2], image.shape[-1]


def rotate_image(image: torch.Tensor, clockwise: bool) -> torch.Tensor:
    """Rotate the spatial axes of an image by 90 degrees."""
    k = -1 if clockwise else 1
    return torch.rot90(image, k, dims=(-2, -1))
