import pytest

from tactics_board.field.coordinates import Rect, clamp_percent, to_normalized, to_pointer


RECT = Rect(left=100.0, top=50.0, width=1100.0, height=700.0)


def test_pointer_maps_to_percentages():
    assert to_normalized(650.0, 400.0, RECT) == (50.0, 50.0)
    assert to_normalized(100.0, 50.0, RECT) == (0.0, 0.0)
    assert to_normalized(1200.0, 750.0, RECT) == (100.0, 100.0)


def test_pointer_outside_container_is_clamped():
    assert to_normalized(-500.0, 2000.0, RECT) == (0.0, 100.0)
    assert to_normalized(5000.0, -10.0, RECT) == (100.0, 0.0)


def test_pointer_roundtrip():
    x, y = to_normalized(*to_pointer(37.5, 81.25, RECT), RECT)
    assert x == pytest.approx(37.5)
    assert y == pytest.approx(81.25)


@pytest.mark.parametrize("rect", [Rect(0, 0, 0, 100), Rect(0, 0, 100, -1)])
def test_degenerate_rect_is_rejected(rect):
    assert rect.is_degenerate
    with pytest.raises(ValueError):
        to_normalized(10, 10, rect)


def test_clamp_percent():
    assert clamp_percent(-0.1) == 0.0
    assert clamp_percent(55) == 55.0
    assert clamp_percent(100.01) == 100.0


def test_rect_geometry():
    assert RECT.right == 1200.0
    assert RECT.bottom == 750.0
    assert RECT.center == (650.0, 400.0)
