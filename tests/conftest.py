"""Shared test fixtures for the seamcarve test suite."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest


@pytest.fixture
def rgb_image():
    """Random 3x12x16 image, fixed seed."""
    torch.manual_seed(42)
    return torch.rand(3, 12, 16)


def make_gradient_image(H, W, channels=3):
    """Vertical gradient: dark top, bright bottom."""
    grad = torch.linspace(0, 1, H).unsqueeze(1).expand(H, W)
    if channels > 0:
        return grad.unsqueeze(0).expand(channels, H, W).clone()
    return grad.clone()


def make_column_coded_image(H, W):
    """Grayscale (1, H, W) image whose pixel value is 100 * column + row."""
    cols = torch.arange(W, dtype=torch.float64).unsqueeze(0) * 100
    rows = torch.arange(H, dtype=torch.float64).unsqueeze(1)
    return (cols + rows).unsqueeze(0)


def row_index_energy(image):
    """Energy equal to the row index: the top row is always cheapest."""
    H, W = image.shape[-2:]
    return torch.arange(H, dtype=torch.float64).unsqueeze(1).expand(H, W)
