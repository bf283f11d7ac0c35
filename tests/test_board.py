from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from triadtcg.engine.board import (
    empty_slots,
    neighbors_of,
    preview_flips,
    resolve_flips,
    stat_value,
    tally_score,
)
from triadtcg.engine.types import Card, NeighborDescriptor


def _grid() -> list[Card | None]:
    return [None for _ in range(9)]


@pytest.mark.parametrize(
    "index,expected",
    [(0, 2), (2, 2), (6, 2), (8, 2), (1, 3), (3, 3), (5, 3), (7, 3), (4, 4)],
)
def test_neighbor_counts(index: int, expected: int) -> None:
    assert len(neighbors_of(index)) == expected


def test_center_neighbors_in_scan_order() -> None:
    assert neighbors_of(4) == (
        NeighborDescriptor(1, 0, 1),
        NeighborDescriptor(7, 1, 0),
        NeighborDescriptor(3, 2, 3),
        NeighborDescriptor(5, 3, 2),
    )


def test_no_wraparound() -> None:
    # 2 is the top-right corner: 3 is on the next row, not to its right
    assert [n.target_index for n in neighbors_of(2)] == [5, 1]
    assert [n.target_index for n in neighbors_of(3)] == [0, 6, 4]


def test_out_of_range_index_has_no_neighbors() -> None:
    assert neighbors_of(-1) == ()
    assert neighbors_of(9) == ()


def test_neighbor_relation_is_symmetric() -> None:
    for a in range(9):
        for n in neighbors_of(a):
            back = [m for m in neighbors_of(n.target_index) if m.target_index == a]
            assert len(back) == 1
            assert back[0].attacker_stat_index == n.defender_stat_index
            assert back[0].defender_stat_index == n.attacker_stat_index


def test_center_card_flips_enemy_above() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[1, 1, 1, 1])
    grid[4] = Card(owner="player", stats=[5, 1, 1, 1])

    assert 1 in [n.target_index for n in neighbors_of(4)]
    assert resolve_flips(grid, 4) == [1]
    assert grid[1] is not None and grid[1].owner == "player"


def test_equal_stats_never_flip() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[9, 3, 9, 9])
    grid[4] = Card(owner="player", stats=[3, 1, 1, 1])

    assert resolve_flips(grid, 4) == []
    assert grid[1] is not None and grid[1].owner == "enemy"


def test_same_owner_neighbors_are_not_flipped() -> None:
    grid = _grid()
    ally = Card(owner="player", stats=[0, 0, 0, 0])
    grid[1] = ally
    grid[4] = Card(owner="player", stats=[9, 9, 9, 9])

    assert resolve_flips(grid, 4) == []
    assert ally.owner == "player"


def test_flips_follow_scan_order() -> None:
    grid = _grid()
    for idx in (5, 3, 7, 1):
        grid[idx] = Card(owner="enemy", stats=[0, 0, 0, 0])
    grid[4] = Card(owner="player", stats=[9, 9, 9, 9])

    assert resolve_flips(grid, 4) == [1, 7, 3, 5]
    assert tally_score(grid).as_dict() == {"player": 5, "enemy": 0}


def test_only_beaten_faces_flip() -> None:
    grid = _grid()
    grid[3] = Card(owner="enemy", stats=[1, 1, 1, 4])  # right face 4
    grid[5] = Card(owner="enemy", stats=[1, 1, 2, 1])  # left face 2
    grid[4] = Card(owner="player", stats=[1, 1, 4, 3])

    assert resolve_flips(grid, 4) == [5]
    assert grid[3] is not None and grid[3].owner == "enemy"


def test_preview_does_not_mutate() -> None:
    grid = _grid()
    defender = Card(owner="enemy", stats=[1, 1, 1, 1])
    grid[1] = defender
    grid[4] = Card(owner="player", stats=[5, 1, 1, 1])

    assert preview_flips(grid, 4) == [1]
    assert defender.owner == "enemy"
    assert resolve_flips(grid, 4) == [1]
    assert defender.owner == "player"


def test_empty_or_malformed_placement_is_noop() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[0, 0, 0, 0])
    assert resolve_flips(grid, 4) == []

    grid[4] = Card(owner="player", stats=None)
    assert resolve_flips(grid, 4) == []
    assert resolve_flips(grid, 42) == []
    assert grid[1] is not None and grid[1].owner == "enemy"


def test_numeric_strings_are_coerced() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=["9", " 2 ", "9", "9"])
    grid[4] = Card(owner="player", stats=["10", "1", "1", "1"])

    # "10" > " 2 " numerically even though it sorts lower as a string
    assert resolve_flips(grid, 4) == [1]


def test_garbage_stats_never_flip() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[0, "abc", 0, 0])
    grid[4] = Card(owner="player", stats=[9, 9, 9, 9])
    assert resolve_flips(grid, 4) == []

    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[0, 0, 0, 0])
    grid[4] = Card(owner="player", stats=["lots", 9, 9, 9])
    assert resolve_flips(grid, 4) == []

    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[0])  # bottom face missing
    grid[4] = Card(owner="player", stats=[9, 9, 9, 9])
    assert resolve_flips(grid, 4) == []


def test_stat_value_coercion() -> None:
    assert stat_value(7) == 7.0
    assert stat_value(2.5) == 2.5
    assert stat_value("3") == 3.0
    assert stat_value("  ") == 0.0
    assert stat_value(None) == 0.0
    assert stat_value(True) == 1.0
    assert math.isnan(stat_value("A"))
    assert math.isnan(stat_value(object()))


@pytest.mark.parametrize(
    "raw,expected",
    [
        (Decimal("5"), 5.0),
        (Decimal("2.5"), 2.5),
        (Fraction(9, 2), 4.5),
        ("Infinity", math.inf),
        (" -Infinity ", -math.inf),
        ("1e2", 100.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("0x1F", 31.0),
        ("-7", -7.0),
    ],
)
def test_stat_value_accepts_numbers_like_js(raw: object, expected: float) -> None:
    assert stat_value(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["inf", "infinity", "-inf", "nan", "NaN", "1_0", "\u0663", "0x", "1e", "--1", Decimal("NaN"), complex(1, 0)],
)
def test_stat_value_rejects_non_js_numbers(raw: object) -> None:
    assert math.isnan(stat_value(raw))


def test_decimal_and_fraction_stats_capture() -> None:
    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[1, 1, 1, 1])
    grid[4] = Card(owner="player", stats=[Decimal("5"), 1, 1, 1])
    assert resolve_flips(grid, 4) == [1]

    grid = _grid()
    grid[1] = Card(owner="enemy", stats=[1, Fraction(7, 2), 1, 1])
    grid[4] = Card(owner="player", stats=[Fraction(4), 1, 1, 1])
    assert resolve_flips(grid, 4) == [1]


def test_python_only_number_spellings_never_flip() -> None:
    for top in ("inf", "infinity", "1_0"):
        grid = _grid()
        grid[1] = Card(owner="enemy", stats=[1, 1, 1, 1])
        grid[4] = Card(owner="player", stats=[top, 1, 1, 1])
        assert resolve_flips(grid, 4) == []
        assert grid[1] is not None and grid[1].owner == "enemy"


def test_tally_counts_owners_and_ignores_empty() -> None:
    grid = _grid()
    grid[0] = Card(owner="player", stats=[1, 1, 1, 1])
    grid[4] = Card(owner="enemy", stats=[1, 1, 1, 1])
    grid[8] = Card(owner="enemy", stats=[1, 1, 1, 1])

    score = tally_score(grid)
    assert (score.player, score.enemy) == (1, 2)
    assert tally_score(_grid()).as_dict() == {"player": 0, "enemy": 0}


def test_empty_slots() -> None:
    grid = _grid()
    grid[0] = Card(owner="player", stats=[1, 1, 1, 1])
    grid[5] = Card(owner="enemy", stats=[1, 1, 1, 1])
    assert empty_slots(grid) == [1, 2, 3, 4, 6, 7, 8]
