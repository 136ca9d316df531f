from itertools import permutations

from warboard.utils.ranking import RankingUtility

from war_helpers import make_player, slot


def test_net_stars_tie_broken_by_net_pct():
    players = [
        make_player(1, "A", slot(3, 80, 1, 20)),
        make_player(2, "B", slot(2, 90, 0, 10)),
    ]

    rows = RankingUtility.build_leaderboard(players)

    assert [(row.name, row.rank) for row in rows] == [("B", 1), ("A", 2)]
    assert (rows[0].net_stars, rows[0].net_pct) == (2, 80)
    assert (rows[1].net_stars, rows[1].net_pct) == (2, 60)


def test_net_stars_ranks_first():
    players = [
        make_player(1, "Low", slot(1, 100, 0, 0)),
        make_player(2, "High", slot(3, 10, 0, 0)),
    ]

    rows = RankingUtility.build_leaderboard(players)

    assert [row.name for row in rows] == ["High", "Low"]


def test_full_tie_ordered_by_name():
    players = [
        make_player(1, "Charlie", slot(2, 50, 1, 10)),
        make_player(2, "Alpha", slot(2, 50, 1, 10)),
        make_player(3, "Bravo", slot(2, 50, 1, 10)),
    ]

    rows = RankingUtility.build_leaderboard(players)

    assert [row.name for row in rows] == ["Alpha", "Bravo", "Charlie"]
    assert [row.rank for row in rows] == [1, 2, 3]


def test_name_tie_break_ignores_case():
    players = [
        make_player(1, "Bob", slot(2, 50, 1, 10)),
        make_player(2, "Ava", slot(2, 50, 1, 10)),
        make_player(3, "alice", slot(2, 50, 1, 10)),
        make_player(4, "ava", slot(2, 50, 1, 10)),
    ]

    rows = RankingUtility.build_leaderboard(players)

    assert [row.name for row in rows] == ["alice", "ava", "Ava", "Bob"]


def test_input_order_does_not_change_ranking():
    players = [
        make_player(1, "Ava", slot(3, 90, 0, 0)),
        make_player(2, "Ben", slot(3, 90, 0, 0), slot(0, 0, 1, 30)),
        make_player(3, "Cy", slot(2, 100, 0, 0)),
        make_player(4, "Dee"),
    ]
    expected = [row.player_id for row in RankingUtility.build_leaderboard(players)]

    for ordering in permutations(players):
        rows = RankingUtility.build_leaderboard(ordering)
        assert [row.player_id for row in rows] == expected


def test_rows_carry_totals_and_one_based_rank():
    rows = RankingUtility.build_leaderboard([
        make_player(7, "Solo", slot(3, 100, 2, 40), slot(1, 20, 0, 0)),
    ])

    assert len(rows) == 1
    row = rows[0]
    assert row.player_id == 7
    assert row.rank == 1
    assert (row.attack_stars, row.attack_pct) == (4, 120)
    assert (row.defense_stars, row.defense_pct) == (2, 40)
    assert (row.net_stars, row.net_pct) == (2, 80)


def test_empty_clan_has_empty_leaderboard():
    assert RankingUtility.build_leaderboard([]) == []
