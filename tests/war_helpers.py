from warboard.data_models.war import PlayerRecord, WarSlot


def slot(attack_stars=0, attack_pct=0, defense_stars=0, defense_pct=0) -> WarSlot:
    return WarSlot(
        attack_stars=attack_stars,
        attack_pct=attack_pct,
        defense_stars=defense_stars,
        defense_pct=defense_pct,
    )


def make_player(player_id, name, *wars, clan_id=1) -> PlayerRecord:
    return PlayerRecord(id=player_id, clan_id=clan_id, name=name, wars=tuple(wars))
