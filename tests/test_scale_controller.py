"""Preview scale factor."""

import math

import pytest

from cardcreator.config import CardCreatorConfig
from cardcreator.controllers.scale_controller import ScaleController


@pytest.fixture
def controller():
    return ScaleController(CardCreatorConfig())


@pytest.mark.parametrize("width, height, expected", [
    (1920, 1080, 1.0),
    (960, 1080, 0.5),
    (1920, 540, 0.5),
    (1200, 900, 0.625),
    (100, 100, 0.1),
    (10000, 10000, 1.2),
])
def test_fit_and_clamp(controller, width, height, expected):
    assert controller.update(width, height) == pytest.approx(expected)


@pytest.mark.parametrize("width, height", [
    (0, 0), (0, 800), (800, 0), (-5, 400), (math.nan, 400), (400, math.inf), (None, 400),
])
def test_degenerate_sizes_keep_previous_factor(controller, width, height):
    controller.update(960, 540)
    assert controller.update(width, height) == pytest.approx(0.5)
    assert controller.compute(width, height) is None


def test_always_within_bounds(controller):
    low, high = controller.bounds
    for w in (1, 50, 300, 1920, 5000, 1e9):
        for h in (1, 50, 300, 1080, 5000):
            assert low <= controller.update(w, h) <= high


def test_initial_value_is_clamped():
    assert ScaleController(CardCreatorConfig(), initial=5).scale == 1.2


def test_custom_bounds():
    controller = ScaleController(CardCreatorConfig(min_scale=0.25, max_scale=2.0))
    assert controller.update(100, 100) == 0.25
    assert controller.update(3840 * 3, 2160 * 3) == 2.0
