#!/usr/bin/env python3
"""
Content-aware resizing from the command line.

Example:
    seamcarve bagel.jpg output/bagel_carved.png --reduce-width 100
"""

import argparse
import sys

import torch

from .carving import reduce_height, reduce_width
from .energy import (compute_energy_map, gradient_magnitude_energy, normalized,
                     sobel_energy)
from .image_io import draw_seam, load_image, save_image
from .seam import generate_seam
from .utils import image_size

ENERGY_FUNCTIONS = {
    'sobel': sobel_energy,
    'gradient': gradient_magnitude_energy,
}


def progress_printer(total: int, label: str, rotated: bool = False):
    """on_seam callback printing progress every tenth of the run.

    With ``rotated`` the callback is fed quarter-turned images (width
    reduction) and reports the size of the upright image.
    """
    step = max(1, total // 10)
    count = 0

    def on_seam(image, seam):
        nonlocal count
        count += 1
        if count % step == 0 or count == total:
            H, W = image_size(image)
            size = (W, H - 1) if rotated else (H - 1, W)
            print(f"  Removed {count}/{total} {label} seams, size: {size[0]} x {size[1]}")

    return on_seam


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='seamcarve',
        description="Shrink an image with seam carving"
    )
    parser.add_argument('input', help='Input image path')
    parser.add_argument('output', help='Output image path')
    parser.add_argument(
        '--reduce-width',
        type=int,
        default=0,
        help='Number of columns to remove (default: 0)'
    )
    parser.add_argument(
        '--reduce-height',
        type=int,
        default=0,
        help='Number of rows to remove (default: 0)'
    )
    parser.add_argument(
        '--energy',
        choices=sorted(ENERGY_FUNCTIONS),
        default='sobel',
        help='Energy function (default: sobel)'
    )
    parser.add_argument(
        '--normalize',
        action='store_true',
        help='Remap the energy of every iteration to [0, 1]'
    )
    parser.add_argument(
        '--device',
        type=str,
        default=None,
        help='Torch device (default: cuda if available, else cpu)'
    )
    parser.add_argument(
        '--seam-preview',
        type=str,
        help='Also save the input with its first horizontal seam drawn in'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Only print errors'
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    device = args.device or ('cuda' if torch.cuda.is_available() else 'cpu')
    energy_fn = ENERGY_FUNCTIONS[args.energy]
    if args.normalize:
        energy_fn = normalized(energy_fn)

    def log(message):
        if not args.quiet:
            print(message)

    try:
        image = load_image(args.input, device=device)
    except (OSError, ValueError) as e:
        print(f"Error: could not read {args.input}: {e}")
        sys.exit(1)

    H, W = image_size(image)
    log(f"Using device: {device}")
    log(f"Image shape: {image.shape[0]} x {H} x {W}")

    try:
        if args.seam_preview:
            seam = generate_seam(compute_energy_map(image, energy_fn))
            save_image(draw_seam(image, seam), args.seam_preview)
            log(f"Saved: {args.seam_preview}")

        carved = image
        if args.reduce_width:
            log(f"Carving image (removing {args.reduce_width} columns)...")
            on_seam = None
            if not args.quiet:
                on_seam = progress_printer(args.reduce_width, 'vertical', rotated=True)
            carved = reduce_width(carved, args.reduce_width, energy_fn=energy_fn,
                                  on_seam=on_seam)
        if args.reduce_height:
            log(f"Carving image (removing {args.reduce_height} rows)...")
            on_seam = None
            if not args.quiet:
                on_seam = progress_printer(args.reduce_height, 'horizontal')
            carved = reduce_height(carved, args.reduce_height, energy_fn=energy_fn,
                                   on_seam=on_seam)

        save_image(carved, args.output)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    log(f"Saved: {args.output}")


if __name__ == '__main__':
    main()
