import asyncio

import pytest

from warboard.cli import main
from warboard.config import Config
from warboard.database.database import Database
from warboard.operations import ClanOperations, PlayerOperations

from war_helpers import slot


@pytest.fixture
def seeded_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setattr(Config, "DATABASE_URL", url)

    async def seed():
        db = Database()
        await db.initialize()
        try:
            clan = await ClanOperations(db.session_factory).create_clan("owner-1", "Night Raiders")
            players = PlayerOperations(db.session_factory)
            ava = await players.create_player(clan.id, "Ava")
            await players.update_war_slot(clan.id, ava.id, 0, slot(3, 90, 1, 30))
            await players.create_player(clan.id, "Ben")
        finally:
            await db.close()

    asyncio.run(seed())
    return url


def test_clans_command(seeded_url, capsys):
    assert main(["clans"]) == 0
    assert "night-raiders\tNight Raiders" in capsys.readouterr().out


def test_leaderboard_command(seeded_url, capsys):
    assert main(["leaderboard", "night-raiders"]) == 0

    out = capsys.readouterr().out
    assert "Night Raiders (2 players)" in out
    ranked = [line.split()[:2] for line in out.splitlines() if line.lstrip()[:2] in ("1.", "2.")]
    assert ranked == [["1.", "Ava"], ["2.", "Ben"]]


def test_export_command_writes_csv(seeded_url, tmp_path, capsys):
    output = tmp_path / "out.csv"

    assert main(["export", "night-raiders", "--output", str(output)]) == 0

    assert output.read_text(encoding="utf-8").splitlines() == [
        "Rank,Player,Total Net Stars,Total Net %",
        "1,Ava,2,60",
        "2,Ben,0,0",
    ]


def test_unknown_slug_reports_error(seeded_url, capsys):
    assert main(["leaderboard", "missing"]) == 1
    assert "Clan not found." in capsys.readouterr().err
