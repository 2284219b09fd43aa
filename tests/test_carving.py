"""
Tests for the carving loop: height reduction, width reduction by rotation,
argument checking and energy injection.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import torch
import pytest
from seamcarve.carving import reduce_height, reduce_width
from seamcarve.energy import gradient_magnitude_energy
from seamcarve.errors import EmptyInputError, InvalidReductionAmountError
from seamcarve.utils import rotate_image

from conftest import make_column_coded_image, make_gradient_image, row_index_energy


class TestReduceHeight:
    def test_zero_returns_input(self, rgb_image):
        carved = reduce_height(rgb_image, 0)
        assert torch.equal(carved, rgb_image)

    def test_reduces_height_exactly(self, rgb_image):
        for n in [0, 1, 5, 12]:
            carved = reduce_height(rgb_image, n)
            assert carved.shape == (3, 12 - n, 16)

    def test_carved_output_is_valid(self):
        torch.manual_seed(42)
        image = torch.rand(3, 30, 30)
        carved = reduce_height(image, 10)
        assert carved.shape == (3, 20, 30)
        assert torch.isfinite(carved).all()
        assert carved.min() >= 0.0
        assert carved.max() <= 1.0

    def test_too_many_rows_rejected(self, rgb_image):
        before = rgb_image.clone()
        with pytest.raises(InvalidReductionAmountError) as excinfo:
            reduce_height(rgb_image, 13)

        err = excinfo.value
        assert err.requested == 13
        assert err.available == 12
        assert err.image is rgb_image
        assert "12" in str(err) and "13" in str(err)
        assert torch.equal(rgb_image, before)

    def test_negative_rejected(self, rgb_image):
        with pytest.raises(InvalidReductionAmountError):
            reduce_height(rgb_image, -1)

    def test_invalid_amount_is_a_value_error(self, rgb_image):
        with pytest.raises(ValueError):
            reduce_height(rgb_image, 100)

    def test_one_at_a_time_matches_single_call(self, rgb_image):
        stepwise = rgb_image
        for _ in range(4):
            stepwise = reduce_height(stepwise, 1)
        assert torch.equal(stepwise, reduce_height(rgb_image, 4))

    def test_input_not_modified(self, rgb_image):
        before = rgb_image.clone()
        reduce_height(rgb_image, 3)
        assert torch.equal(rgb_image, before)

    def test_injected_energy_removes_top_rows(self, rgb_image):
        carved = reduce_height(rgb_image, 3, energy_fn=row_index_energy)
        assert torch.equal(carved, rgb_image[:, 3:, :])

    def test_injected_energy_removes_bottom_rows(self, rgb_image):
        def bottom_cheapest(image):
            return row_index_energy(image).flip(0)

        carved = reduce_height(rgb_image, 4, energy_fn=bottom_cheapest)
        assert torch.equal(carved, rgb_image[:, :8, :])

    def test_huge_energies_still_carve(self, rgb_image):
        def huge(image):
            return torch.full(image.shape[-2:], 1e308, dtype=torch.float64)

        carved = reduce_height(rgb_image, 2, energy_fn=huge)
        assert torch.equal(carved, rgb_image[:, 2:, :])

    def test_pixels_stay_in_their_column(self):
        image = make_column_coded_image(10, 7)
        carved = reduce_height(image, 4, energy_fn=gradient_magnitude_energy)
        for x in range(7):
            column = carved[0, :, x]
            assert ((column // 100) == x).all()
            assert (column[1:] > column[:-1]).all()

    def test_seams_avoid_high_energy_edge(self):
        """A horizontal edge should survive carving."""
        H, W = 30, 40
        image = torch.zeros(3, H, W)
        image[:, 15:, :] = 1.0
        carved = reduce_height(image, 5)
        col_mid = W // 2
        values = carved[0, :, col_mid]
        diffs = (values[1:] - values[:-1]).abs()
        assert diffs.max() > 0.5, f"Edge disappeared: max diff = {diffs.max():.4f}"

    def test_grayscale_and_uint8_images(self):
        gray = make_gradient_image(10, 8, channels=0)
        assert reduce_height(gray, 2).shape == (8, 8)

        image = torch.randint(0, 256, (3, 10, 8), dtype=torch.uint8)
        carved = reduce_height(image, 2)
        assert carved.shape == (3, 8, 8)
        assert carved.dtype == torch.uint8

    def test_single_row_image(self):
        image = torch.rand(3, 1, 5)
        assert reduce_height(image, 1).shape == (3, 0, 5)

    def test_zero_width_image_rejected(self):
        image = torch.zeros(3, 4, 0)
        assert reduce_height(image, 0) is image
        with pytest.raises(EmptyInputError):
            reduce_height(image, 1)

    def test_on_seam_called_each_iteration(self, rgb_image):
        seen = []
        reduce_height(rgb_image, 3, on_seam=lambda im, seam: seen.append((im.shape, seam.shape)))
        assert seen == [((3, 12, 16), (16,)),
                        ((3, 11, 16), (16,)),
                        ((3, 10, 16), (16,))]

    def test_on_seam_can_abort(self, rgb_image):
        before = rgb_image.clone()

        class Budget(Exception):
            pass

        def on_seam(image, seam):
            if image.shape[1] < 11:
                raise Budget()

        with pytest.raises(Budget):
            reduce_height(rgb_image, 5, on_seam=on_seam)
        assert torch.equal(rgb_image, before)

    def test_energy_errors_propagate(self, rgb_image):
        def broken(image):
            raise RuntimeError("no energy")

        with pytest.raises(RuntimeError, match="no energy"):
            reduce_height(rgb_image, 1, energy_fn=broken)


class TestReduceWidth:
    def test_reduces_width_exactly(self, rgb_image):
        for n in [0, 1, 5, 16]:
            carved = reduce_width(rgb_image, n)
            assert carved.shape == (3, 12, 16 - n)

    def test_zero_returns_same_pixels(self, rgb_image):
        assert torch.equal(reduce_width(rgb_image, 0), rgb_image)

    def test_matches_rotated_height_reduction(self, rgb_image):
        expected = rotate_image(reduce_height(rotate_image(rgb_image, clockwise=False), 6),
                                clockwise=True)
        assert torch.equal(reduce_width(rgb_image, 6), expected)

    def test_rotation_is_counter_clockwise_quarter_turn(self):
        image = torch.tensor([[1, 2],
                              [3, 4]])
        assert rotate_image(image, clockwise=False).tolist() == [[2, 4], [1, 3]]
        assert torch.equal(rotate_image(rotate_image(image, False), True), image)

    def test_checks_width_not_height(self):
        image = torch.rand(3, 10, 4)
        with pytest.raises(InvalidReductionAmountError) as excinfo:
            reduce_width(image, 5)
        assert excinfo.value.available == 4
        assert excinfo.value.dimension == 'width'
        assert excinfo.value.image is image

    def test_tall_image_can_lose_all_columns(self):
        image = torch.rand(3, 4, 10)
        assert reduce_width(image, 10).shape == (3, 4, 0)

    def test_injected_energy_sees_rotated_image(self, rgb_image):
        # After a counter-clockwise turn, the last column is the top row
        carved = reduce_width(rgb_image, 3, energy_fn=row_index_energy)
        assert torch.equal(carved, rgb_image[:, :, :13])

    def test_seams_avoid_high_energy_edge(self):
        torch.manual_seed(42)
        H, W = 30, 40
        image = torch.zeros(3, H, W)
        image[:, :, 20:] = 1.0
        carved = reduce_width(image, 5)
        values = carved[0, H // 2, :]
        diffs = (values[1:] - values[:-1]).abs()
        assert diffs.max() > 0.5, f"Edge disappeared: max diff = {diffs.max():.4f}"
