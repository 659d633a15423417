import pytest

from tactics_board.field.annotations import (
    HORIZONTAL_ZONES,
    VERTICAL_ZONES,
    AnnotationAction,
    Waypoint,
    WaypointList,
    WaypointSelector,
    apply_action,
    available_actions,
    locate_zones,
    zones_for,
)
from tactics_board.field.registry import PlayerRegistry
from tactics_board.models import default_lineup


@pytest.fixture
def registry() -> PlayerRegistry:
    return PlayerRegistry(default_lineup())


def test_captain_is_exclusive(registry: PlayerRegistry):
    assert apply_action(registry, 4, AnnotationAction.CAPTAIN) is True
    assert registry.get(4).is_captain

    assert available_actions(registry, 7)[AnnotationAction.CAPTAIN] is False
    assert available_actions(registry, 4)[AnnotationAction.CAPTAIN] is True
    assert apply_action(registry, 7, "captain") is False
    assert [player.id for player in registry if player.is_captain] == [4]

    assert apply_action(registry, 4, "captain") is True
    assert registry.has_captain is False
    assert apply_action(registry, 7, "captain") is True
    assert registry.captain().id == 7


@pytest.mark.parametrize(
    ("action", "flag"),
    [("yellow", "has_yellow_card"), ("red", "has_red_card"), ("key", "is_star_player")],
)
def test_card_and_star_toggles(registry: PlayerRegistry, action, flag):
    apply_action(registry, 6, action)
    assert getattr(registry.get(6), flag) is True
    apply_action(registry, 6, action)
    assert getattr(registry.get(6), flag) is False


def test_actions_for_unknown_player(registry: PlayerRegistry):
    assert not any(available_actions(registry, 99).values())
    assert apply_action(registry, 99, "red") is False


def test_unknown_action_name_raises(registry: PlayerRegistry):
    with pytest.raises(ValueError):
        apply_action(registry, 1, "blue")


def test_action_labels():
    assert AnnotationAction.CAPTAIN.label == "Toggle Captain"
    assert AnnotationAction.KEY.flag == "is_star_player"


def test_waypoint_two_click_protocol():
    selector = WaypointSelector()
    assert selector.click(3) is None
    assert selector.selected == 3
    assert selector.click(8) == Waypoint(from_id=3, to_id=8)
    assert selector.is_idle

    assert selector.click(5) is None
    assert selector.click(5) is None
    assert selector.is_idle


def test_waypoint_list_allows_duplicates_and_removes_by_index(registry: PlayerRegistry):
    waypoints = WaypointList()
    changes = []
    waypoints.subscribe(changes.append)

    waypoints.add(Waypoint(1, 9))
    waypoints.add(Waypoint(1, 9))
    waypoints.add(Waypoint(9, 11))
    assert len(waypoints) == 3

    assert waypoints.remove(0) is True
    assert list(waypoints) == [Waypoint(1, 9), Waypoint(9, 11)]
    assert waypoints.remove(5) is False
    assert changes == ["waypoints"] * 4


def test_waypoint_segments_follow_players(registry: PlayerRegistry):
    waypoints = WaypointList([Waypoint(1, 9), Waypoint(9, 42)])

    assert waypoints.segments(registry) == [(5.0, 50.0, 65.0, 50.0)]

    registry.update(9, x=70, y=40)
    assert waypoints.segments(registry) == [(5.0, 50.0, 70.0, 40.0)]


def test_waypoint_descriptions(registry: PlayerRegistry):
    registry.update(1, name="Keeper")
    waypoints = WaypointList([Waypoint(1, 9), Waypoint(9, 42)])

    assert waypoints.describe(registry) == ["Keeper → Player 9", "Player 9 → Player 42"]


def test_zone_bands_cover_the_pitch():
    assert [(zone.start, zone.end) for zone in HORIZONTAL_ZONES] == [(0, 25), (25, 75), (75, 100)]
    assert [(zone.start, zone.end) for zone in VERTICAL_ZONES] == [
        (0, 15),
        (15, 25),
        (25, 75),
        (75, 85),
        (85, 100),
    ]
    assert HORIZONTAL_ZONES[1].rect() == pytest.approx((2000 / 550 + 25 * 510 / 550, 2000 / 350, 50 * 510 / 550, 31000 / 350))
    assert VERTICAL_ZONES[0].rect() == pytest.approx((2000 / 550, 2000 / 350, 15 * 510 / 550, 31000 / 350))


@pytest.mark.parametrize("zones", [HORIZONTAL_ZONES, VERTICAL_ZONES])
def test_zones_are_vertical_strips_inside_the_touchlines(zones):
    first_x, _, _, _ = zones[0].rect()
    last_x, _, last_width, _ = zones[-1].rect()

    assert first_x == pytest.approx(100 * 20 / 550)
    assert last_x + last_width == pytest.approx(100 * 530 / 550)
    for zone in zones:
        _, top, _, height = zone.rect()
        assert top == pytest.approx(100 * 20 / 350)
        assert top + height == pytest.approx(100 * 330 / 350)


def test_zones_for_modes():
    assert zones_for(False, False) == []
    assert len(zones_for(True, False)) == 3
    assert len(zones_for(False, True)) == 5
    assert len(zones_for(True, True)) == 8


@pytest.mark.parametrize(
    ("point", "third", "lane"),
    [
        ((5, 50), "defensive", "wide-left"),
        ((20, 20), "defensive", "half-left"),
        ((50, 80), "middle", "center"),
        ((80, 10), "attacking", "half-right"),
        ((100, 100), "attacking", "wide-right"),
        ((-10, 50), "defensive", "wide-left"),
    ],
)
def test_locate_zones(point, third, lane):
    found_third, found_lane = locate_zones(*point)
    assert (found_third.key, found_lane.key) == (third, lane)


def test_locate_zones_ignores_height_on_the_pitch():
    assert locate_zones(50, 0) == locate_zones(50, 100)
