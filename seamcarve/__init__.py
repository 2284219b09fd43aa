"""
Content-aware image resizing by seam carving.

Based on "Seam Carving for Content-Aware Image Resizing"
by Avidan & Shamir, 2007.
"""

__version__ = "0.1.0"

from .errors import (SeamCarvingError, InvalidReductionAmountError,
                     DimensionMismatchError, EmptyInputError)
from .energy import (EnergyFunction, compute_energy_map, grayscale, sobel_energy,
                     gradient_magnitude_energy, normalize_energy, normalized)
from .seam import (UNREACHABLE, build_cost_matrix, find_lowest_cost_seam,
                   generate_seam, seam_points, remove_seam)
from .carving import reduce_height, reduce_width

__all__ = [
    'SeamCarvingError',
    'InvalidReductionAmountError',
    'DimensionMismatchError',
    'EmptyInputError',
    'EnergyFunction',
    'compute_energy_map',
    'grayscale',
    'sobel_energy',
    'gradient_magnitude_energy',
    'normalize_energy',
    'normalized',
    'UNREACHABLE',
    'build_cost_matrix',
    'find_lowest_cost_seam',
    'generate_seam',
    'seam_points',
    'remove_seam',
    'reduce_height',
    'reduce_width',
]
