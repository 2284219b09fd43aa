"""
High-level carving functions that repeat the seam pipeline.

Each iteration recomputes the energy map from the current image, builds
the cost matrix, backtracks the cheapest seam and removes it. Nothing is
carried over between iterations except the shrinking image.
"""

from typing import Callable, Optional

import torch

from .energy import EnergyFunction, compute_energy_map, sobel_energy
from .errors import InvalidReductionAmountError
from .seam import build_cost_matrix, find_lowest_cost_seam, remove_seam
from .utils import image_size, rotate_image

# on_seam(current_image, seam) -> None, called before each removal
OnSeam = Optional[Callable[[torch.Tensor, torch.Tensor], None]]


def reduce_height(image: torch.Tensor, n: int,
                  energy_fn: EnergyFunction = sobel_energy,
                  on_seam: OnSeam = None) -> torch.Tensor:
    """
    Remove n horizontal seams, making the image n rows shorter.

    The input tensor is never modified, so a failure part way through
    leaves the caller's image as it was.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        n: Number of rows to remove, 0 <= n <= H
        energy_fn: Image -> (H, W) energy map
        on_seam: Optional callback, invoked with the current image and the
            seam about to be removed. Exceptions it raises abort the loop.

    Returns:
        Carved image (C, H - n, W) or (H - n, W)
    """
    H, _ = image_size(image)
    if n < 0 or n > H:
        raise InvalidReductionAmountError(n, H, image, dimension='height')

    carved = image
    for _ in range(n):
        energy = compute_energy_map(carved, energy_fn)
        seam = find_lowest_cost_seam(build_cost_matrix(energy))
        if on_seam is not None:
            on_seam(carved, seam)
        carved = remove_seam(carved, seam)

    return carved


def reduce_width(image: torch.Tensor, n: int,
                 energy_fn: EnergyFunction = sobel_energy,
                 on_seam: OnSeam = None) -> torch.Tensor:
    """
    Remove n vertical seams, making the image n columns narrower.

    Rotates the image a quarter turn counter-clockwise, reduces its
    height, and rotates it back. ``on_seam`` sees the rotated image.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        n: Number of columns to remove, 0 <= n <= W
        energy_fn: Image -> (H, W) energy map
        on_seam: Optional callback, see reduce_height

    Returns:
        Carved image (C, H, W - n) or (H, W - n)
    """
    _, W = image_size(image)
    if n < 0 or n > W:
        raise InvalidReductionAmountError(n, W, image, dimension='width')

    rotated = rotate_image(image, clockwise=False)
    carved = reduce_height(rotated, n, energy_fn=energy_fn, on_seam=on_seam)
    return rotate_image(carved, clockwise=True)
