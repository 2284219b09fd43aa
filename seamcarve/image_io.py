"""
Reading, writing and annotating images as tensors.

Tensors are channels-first float32 in [0, 1], the layout the carving
functions work on.
"""

from pathlib import Path
from typing import Sequence, Union

import numpy as np
import torch
from PIL import Image

from .utils import image_size

PathLike = Union[str, Path]


def load_image(path: PathLike, device='cpu') -> torch.Tensor:
    """Load image and convert to torch tensor (C, H, W).

    Images with an alpha band load as RGBA, everything else as RGB.
    """
    with Image.open(path) as img:
        mode = 'RGBA' if 'A' in img.getbands() or 'transparency' in img.info else 'RGB'
        img_array = np.array(img.convert(mode), dtype=np.float32) / 255.0
    img_tensor = torch.from_numpy(img_array).permute(2, 0, 1).contiguous().to(device)
    return img_tensor


def save_image(tensor: torch.Tensor, path: PathLike) -> None:
    """Save torch tensor (C, H, W) or (H, W) as image."""
    H, W = image_size(tensor)
    if H == 0 or W == 0:
        raise ValueError(f"Cannot save an empty {H}x{W} image")

    if tensor.dim() == 3 and tensor.shape[0] == 1:
        tensor = tensor[0]

    if tensor.dim() == 2:
        img_array = tensor.detach().cpu().numpy()
    else:
        channels = tensor.shape[0]
        if channels not in (3, 4):
            raise ValueError(f"Cannot save an image with {channels} channels")
        img_array = tensor.detach().permute(1, 2, 0).cpu().numpy()

    if np.issubdtype(img_array.dtype, np.floating):
        img_array = (img_array * 255).round().clip(0, 255)
    img_array = img_array.astype(np.uint8)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(img_array).save(path)


def draw_seam(image: torch.Tensor, seam: torch.Tensor,
              color: Sequence[float] = (1.0, 0.0, 0.0)) -> torch.Tensor:
    """Copy of the image with a horizontal seam painted in.

    Images with fewer than three channels get the mean of ``color``.
    Any alpha channel is made opaque along the seam.
    """
    img_vis = image.clone()
    cols = torch.arange(seam.shape[0], device=image.device)
    rows = seam.to(image.device)
    gray = float(sum(color)) / len(color)

    if img_vis.dim() == 2:
        img_vis[rows, cols] = gray
        return img_vis

    channels = img_vis.shape[0]
    if channels >= 3:
        paint = list(color) + [1.0] * (channels - 3)
    else:
        paint = [gray] + [1.0] * (channels - 1)
    for c, value in enumerate(paint):
        img_vis[c, rows, cols] = value
    return img_vis
