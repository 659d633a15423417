import pytest
from pydantic import ValidationError

from tactics_board.models import Player, default_lineup


def test_player_is_frozen():
    player = Player(id=1, x=10, y=20, number=7)

    assert player.label == "7"
    assert player.display_name == "Player 7"

    with pytest.raises((TypeError, ValidationError)):
        player.x = 50  # type: ignore[misc]


def test_player_coordinates_are_clamped():
    player = Player(id=1, x=-12.5, y=140, number=1)
    assert (player.x, player.y) == (0.0, 100.0)

    moved = player.with_changes(x=250, y=-3)
    assert (moved.x, moved.y) == (100.0, 0.0)
    assert player.x == 0.0


def test_player_accepts_camel_case_payload():
    player = Player.model_validate(
        {"id": 4, "x": 30, "y": 60, "number": 4, "position": "CB", "isCaptain": True, "hasRedCard": True}
    )
    assert player.is_captain is True
    assert player.has_red_card is True
    assert player.label == "CB"


@pytest.mark.parametrize("number", [0, 12])
def test_player_number_range(number):
    with pytest.raises(ValidationError):
        Player(id=1, x=0, y=0, number=number)


def test_position_is_at_most_two_characters():
    with pytest.raises(ValidationError):
        Player(id=1, x=0, y=0, number=1, position="GKP")


def test_default_lineup_layout():
    lineup = default_lineup()

    assert len(lineup) == 11
    assert len({player.id for player in lineup}) == 11
    assert sorted(player.number for player in lineup) == list(range(1, 12))
    keeper = lineup[0]
    assert (keeper.x, keeper.y, keeper.number) == (5.0, 50.0, 1)
    assert not any(player.is_captain for player in lineup)
    assert default_lineup() is not lineup
