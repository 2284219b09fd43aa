"""
Energy functions for seam carving.

The energy function determines which pixels are "important".
Low-energy seams are preferred for removal.

The engine only relies on the contract of ``EnergyFunction``: one
non-negative scalar per pixel, higher meaning more visually important.
The default is grayscale followed by a Sobel gradient magnitude.
"""

from typing import Callable

import torch
import torch.nn.functional as F

from .errors import DimensionMismatchError, EmptyInputError
from .utils import image_size

EnergyFunction = Callable[[torch.Tensor], torch.Tensor]

_SOBEL_X = [[-1, 0, 1],
            [-2, 0, 2],
            [-1, 0, 1]]

_SOBEL_Y = [[-1, -2, -1],
            [ 0,  0,  0],
            [ 1,  2,  1]]


def grayscale(image: torch.Tensor) -> torch.Tensor:
    """
    Convert an image to a single luminance channel.

    Images with three or more channels use the Rec. 601 luma weights on
    the first three channels (alpha is ignored). One- and two-channel
    images use their first channel. Integer images are divided by the
    largest value of their dtype (255 for uint8); bool images map to 0 and 1.

    Args:
        image: Image tensor (C, H, W) or (H, W)

    Returns:
        Grayscale image (H, W), floating point
    """
    if image.dtype == torch.bool:
        image = image.float()
    elif not image.is_floating_point():
        image = image.float() / float(torch.iinfo(image.dtype).max)

    if image.dim() == 2:
        return image
    if image.dim() != 3:
        raise ValueError(f"Expected image of shape (C, H, W) or (H, W), "
                         f"got {tuple(image.shape)}")

    if image.shape[0] >= 3:
        return 0.299 * image[0] + 0.587 * image[1] + 0.114 * image[2]
    return image[0]


def _sobel_gradients(gray: torch.Tensor, padding_mode: str):
    sobel_x = torch.tensor(_SOBEL_X, dtype=gray.dtype, device=gray.device).view(1, 1, 3, 3)
    sobel_y = torch.tensor(_SOBEL_Y, dtype=gray.dtype, device=gray.device).view(1, 1, 3, 3)

    # (1, 1, H, W) batch for conv2d
    batch = gray.unsqueeze(0).unsqueeze(0)
    batch = F.pad(batch, (1, 1, 1, 1), mode=padding_mode)

    grad_x = F.conv2d(batch, sobel_x)[0, 0]
    grad_y = F.conv2d(batch, sobel_y)[0, 0]
    return grad_x, grad_y


def sobel_energy(image: torch.Tensor) -> torch.Tensor:
    """
    Default energy: grayscale followed by a Sobel edge filter.

    Borders are handled by replicating the edge pixels. The L2 gradient
    magnitude is clamped to [0, 1], so the energy of a float image in
    [0, 1] never exceeds 1.

    Args:
        image: RGB(A) image tensor (C, H, W) or grayscale (H, W)

    Returns:
        Energy map (H, W)
    """
    gray = grayscale(image)
    grad_x, grad_y = _sobel_gradients(gray, padding_mode='replicate')
    return torch.sqrt(grad_x ** 2 + grad_y ** 2).clamp(0.0, 1.0)


def gradient_magnitude_energy(image: torch.Tensor) -> torch.Tensor:
    """
    Compute gradient magnitude energy for an image.

    Uses L1 norm of image gradients:
    E_I(i,j) = ||∂/∂x I(i,j)|| + ||∂/∂y I(i,j)||

    This is the standard energy function from Avidan & Shamir 2007.
    Borders are zero padded, so a bright image has energy along its frame.

    Args:
        image: RGB image tensor (C, H, W) or grayscale (H, W)

    Returns:
        Energy map (H, W)
    """
    gray = grayscale(image)
    grad_x, grad_y = _sobel_gradients(gray, padding_mode='constant')
    return torch.abs(grad_x) + torch.abs(grad_y)


def normalize_energy(energy: torch.Tensor, eps: float = 1e-8) -> torch.Tensor:
    """Remap energy to [0, 1] range.

    This is a monotonic transform so seam positions are unchanged
    (up to ties introduced by floating point rounding).

    Args:
        energy: Energy map (H, W)
        eps: Small value to avoid division by zero

    Returns:
        Normalized energy map in [0, 1]
    """
    e_min = energy.min()
    e_max = energy.max()
    return (energy - e_min) / (e_max - e_min + eps)


def normalized(energy_fn: EnergyFunction) -> EnergyFunction:
    """Wrap an energy function so its output goes through normalize_energy."""
    def wrapped(image: torch.Tensor) -> torch.Tensor:
        return normalize_energy(energy_fn(image))

    wrapped.__name__ = f"normalized_{getattr(energy_fn, '__name__', 'energy')}"
    return wrapped


def compute_energy_map(image: torch.Tensor,
                       energy_fn: EnergyFunction = sobel_energy) -> torch.Tensor:
    """
    Build the energy field of an image with the given energy function.

    Failures raised by ``energy_fn`` propagate unchanged.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        energy_fn: Image -> (H, W) non-negative field

    Returns:
        Energy map (H, W)
    """
    H, W = image_size(image)
    if H == 0 or W == 0:
        raise EmptyInputError(f"Cannot compute energy of an empty {H}x{W} image")

    energy = energy_fn(image)
    if tuple(energy.shape) != (H, W):
        raise DimensionMismatchError(
            f"Energy function returned shape {tuple(energy.shape)}, expected {(H, W)}")
    return energy
