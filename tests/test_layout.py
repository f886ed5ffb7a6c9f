"""Layout template evaluation."""

import pytest

from cardcreator.schemas.layout_schema import CANVAS, CARD_TEMPLATE, evaluate_region, evaluate_slots
from cardcreator.utils.geometry import Rect, Size


def test_region_rect_is_percentage_of_canvas():
    rect = CARD_TEMPLATE.rect("name")
    assert rect.x == pytest.approx(0.3603 * 1920)
    assert rect.y == pytest.approx(0.17 * 1080)
    assert rect.width == pytest.approx(0.6197 * 1920)
    assert rect.height == pytest.approx(0.085 * 1080)


def test_evaluation_is_deterministic():
    for region in CARD_TEMPLATE.regions:
        assert evaluate_region(region, CANVAS) == evaluate_region(region, CANVAS)


def test_regions_scale_with_canvas():
    half = Size(960, 540)
    for region in CARD_TEMPLATE.regions:
        full = evaluate_region(region, CANVAS)
        small = evaluate_region(region, half)
        assert small.x == pytest.approx(full.x / 2)
        assert small.height == pytest.approx(full.height / 2)


def test_all_regions_fit_inside_canvas():
    for region in CARD_TEMPLATE.regions:
        rect = evaluate_region(region)
        assert rect.x >= 0 and rect.y >= 0
        assert rect.right <= CANVAS.width + 1e-6
        assert rect.bottom <= CANVAS.height + 1e-6


def test_column_slots_stack_downwards():
    slots = evaluate_slots(CARD_TEMPLATE.region("core_skills_list"), 3)
    assert len(slots) == 3
    assert slots[0].height == pytest.approx(52)
    assert slots[1].y == pytest.approx(slots[0].y + 52 + 20)
    assert all(s.x == slots[0].x for s in slots)


def test_row_slots_run_left_to_right():
    slots = CARD_TEMPLATE.slots("actions", 2)
    assert slots[0].width == pytest.approx(160)
    assert slots[1].x == pytest.approx(slots[0].x + 160 + 16)
    assert slots[0].y == slots[1].y


def test_slots_need_item_extent():
    with pytest.raises(ValueError):
        CARD_TEMPLATE.slots("name", 2)


def test_unknown_region():
    with pytest.raises(KeyError):
        CARD_TEMPLATE.region("footer")


def test_contact_cells_and_link_rect():
    row = CARD_TEMPLATE.slots("contact", 1)[0]
    label, value = CARD_TEMPLATE.contact_cells(row)
    assert label.x == row.x
    assert label.width == pytest.approx(300)
    assert value.x == pytest.approx(row.x + 316)
    assert value.right == pytest.approx(row.right)
    link = CARD_TEMPLATE.link_rect(value)
    assert link == Rect(value.x, value.y, 180, value.height)
