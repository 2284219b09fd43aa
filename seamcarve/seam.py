"""
Seam computation by dynamic programming.

Seams run from the left edge of the image to the right edge, one pixel
per column, and removing one makes the image a row shorter. Width
reduction rotates the image first (see carving.py).

A seam is a long tensor of shape (W,) holding the row index for each
column.
"""

import sys
from typing import List, Sequence, Tuple, Union

import torch

from .errors import DimensionMismatchError, EmptyInputError
from .utils import image_size

# Cost of a neighbour row that does not exist. Finite, so sums stay defined.
UNREACHABLE = sys.float_info.max


def build_cost_matrix(energy: torch.Tensor) -> torch.Tensor:
    """
    Cumulative energy of the cheapest left-to-right path reaching each pixel.

    cost[y, 0] = energy[y, 0]
    cost[y, x] = energy[y, x] + min(cost[y-1, x-1], cost[y, x-1], cost[y+1, x-1])

    Columns depend on the column to their left, so they are filled in
    order; all rows of one column are computed in a single tensor op.

    Args:
        energy: Energy map (H, W)

    Returns:
        Cost matrix (H, W), float64
    """
    if energy.dim() != 2:
        raise ValueError(f"Expected energy map of shape (H, W), got {tuple(energy.shape)}")

    H, W = energy.shape
    if H == 0 or W == 0:
        raise EmptyInputError(f"Cannot carve an empty {H}x{W} energy map")

    energy = energy.to(torch.float64)
    cost = torch.empty((H, W), dtype=torch.float64, device=energy.device)
    cost[:, 0] = energy[:, 0]

    border = torch.full((1,), UNREACHABLE, dtype=torch.float64, device=energy.device)
    for x in range(1, W):
        left = cost[:, x - 1]
        up = torch.cat([border, left[:-1]])
        down = torch.cat([left[1:], border])
        cost[:, x] = energy[:, x] + torch.minimum(torch.minimum(up, left), down)

    return cost


def find_lowest_cost_seam(cost: torch.Tensor) -> torch.Tensor:
    """
    Backtrack a cost matrix into the cheapest left-to-right seam.

    The seam ends at the first row holding the minimum of the last column.
    Walking back, equal predecessors are resolved up first, then level,
    then down.

    Args:
        cost: Cost matrix (H, W) from build_cost_matrix

    Returns:
        Seam (W,) with the row index for each column
    """
    if cost.dim() != 2:
        raise ValueError(f"Expected cost matrix of shape (H, W), got {tuple(cost.shape)}")

    H, W = cost.shape
    if H == 0 or W == 0:
        raise EmptyInputError(f"Cannot find a seam in an empty {H}x{W} cost matrix")

    columns = cost.t().tolist()
    last = columns[W - 1]
    y = min(range(H), key=last.__getitem__)

    rows = [0] * W
    rows[W - 1] = y
    for x in range(W - 2, -1, -1):
        column = columns[x]
        left = column[y]
        up = column[y - 1] if y > 0 else UNREACHABLE
        down = column[y + 1] if y < H - 1 else UNREACHABLE

        # Edges are checked by position: costs may overflow past the sentinel
        if y > 0 and up <= left and (y == H - 1 or up <= down):
            y -= 1
        elif y == H - 1 or left <= down:
            pass
        else:
            y += 1
        rows[x] = y

    return torch.tensor(rows, dtype=torch.long, device=cost.device)


def generate_seam(energy: torch.Tensor) -> torch.Tensor:
    """Optimal seam for removal, straight from an energy map."""
    return find_lowest_cost_seam(build_cost_matrix(energy))


def seam_points(seam: torch.Tensor) -> List[Tuple[int, int]]:
    """Seam as an ordered list of (x, y) points, one per column."""
    return [(x, int(y)) for x, y in enumerate(seam.tolist())]


def remove_seam(image: torch.Tensor,
                seam: Union[torch.Tensor, Sequence[int]]) -> torch.Tensor:
    """
    Remove a seam from an image.

    In every column the seam's pixel is dropped and the pixels below it
    move up by one row. Pixels never change column.

    Args:
        image: Image tensor (C, H, W) or (H, W)
        seam: Row index per column (W,)

    Returns:
        Carved image with one row removed, same dtype and device
    """
    H, W = image_size(image)
    seam = torch.as_tensor(seam, dtype=torch.long, device=image.device)

    if seam.dim() != 1 or seam.shape[0] != W:
        raise DimensionMismatchError(
            f"Seam of shape {tuple(seam.shape)} does not fit image width {W}")
    if H == 0:
        raise EmptyInputError("Cannot remove a seam from an image with no rows")
    if W > 0 and (seam.min().item() < 0 or seam.max().item() >= H):
        raise DimensionMismatchError(
            f"Seam rows must lie in [0, {H}), got [{seam.min().item()}, {seam.max().item()}]")

    # Output row r of column x comes from source row r, or r + 1 at or below the seam
    rows = torch.arange(H - 1, device=image.device).unsqueeze(1)
    source_rows = rows + (rows >= seam.unsqueeze(0)).long()

    if image.dim() == 3:
        source_rows = source_rows.unsqueeze(0).expand(image.shape[0], -1, -1)

    return torch.gather(image, -2, source_rows)
