"""
Working state of the war board editor.

The owner edits war slots locally before committing them. This module holds
that in-memory view as one immutable WarBoardState value, and every change
to it is a pure transition function returning a new state:

    load_players -> apply_edit* -> begin_save -> reconcile_saved | fail_save

Per war index the state tracks whether there are unsaved edits (dirty),
whether a save or reset is in flight, and a revision counter bumped on every
edit. The revision lets a save that finishes after further edits tell that
its results are already stale.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from warboard.constants import WarConstants
from warboard.data_models.war import PlayerRecord
from warboard.utils.exceptions import NotFoundError, SaveInProgressError
from warboard.utils.validation import clamp_war_field, validate_war_index


def _zero_revisions() -> Tuple[int, ...]:
    return (0,) * WarConstants.WAR_COUNT


@dataclass(frozen=True)
class WarBoardState:
    """Immutable snapshot of the editor: players plus per-war flags."""
    players: Tuple[PlayerRecord, ...] = ()
    dirty: FrozenSet[int] = frozenset()
    revisions: Tuple[int, ...] = field(default_factory=_zero_revisions)
    saving: FrozenSet[int] = frozenset()
    resetting: FrozenSet[int] = frozenset()
    saved: Optional[int] = None  # War index showing "saved" feedback
    error: Optional[str] = None
    
    def is_dirty(self, war_index: int) -> bool:
        return war_index in self.dirty
    
    def is_saving(self, war_index: int) -> bool:
        return war_index in self.saving
    
    def is_resetting(self, war_index: int) -> bool:
        return war_index in self.resetting
    
    def revision(self, war_index: int) -> int:
        return self.revisions[war_index]
    
    def dirty_flags(self) -> Dict[int, bool]:
        """War index -> has unsaved edits, for every war."""
        return {index: index in self.dirty for index in range(WarConstants.WAR_COUNT)}
    
    def get_player(self, player_id: int) -> PlayerRecord:
        for player in self.players:
            if player.id == player_id:
                return player
        raise NotFoundError("Player", player_id)


def load_players(state: WarBoardState, players: Iterable[PlayerRecord]) -> WarBoardState:
    """Replace the working set with freshly fetched players."""
    return replace(state, players=tuple(players))


def add_player(state: WarBoardState, player: PlayerRecord) -> WarBoardState:
    return replace(state, players=state.players + (player,))


def remove_player(state: WarBoardState, player_id: int) -> WarBoardState:
    return replace(state, players=tuple(p for p in state.players if p.id != player_id))


def apply_edit(state: WarBoardState, player_id: int, war_index: int,
               field_name: str, raw_value) -> WarBoardState:
    """
    Apply one cell edit to the working state.
    
    The value is clamped, never rejected. Only that player's slot changes,
    the war is marked dirty, and any "saved" feedback is cleared for every
    war, not just this one.
    """
    validate_war_index(war_index)
    value = clamp_war_field(field_name, raw_value)
    player = state.get_player(player_id)
    
    slot = player.slot(war_index).with_field(field_name, value)
    updated = player.with_slot(war_index, slot)
    players = tuple(updated if p.id == player_id else p for p in state.players)
    
    revisions = list(state.revisions)
    revisions[war_index] += 1
    
    return replace(
        state,
        players=players,
        dirty=state.dirty | {war_index},
        revisions=tuple(revisions),
        saved=None,
    )


def begin_save(state: WarBoardState, war_index: int) -> WarBoardState:
    """Mark a war as saving; a second save of the same war is refused."""
    validate_war_index(war_index)
    if war_index in state.saving:
        raise SaveInProgressError(war_index)
    return replace(state, saving=state.saving | {war_index}, saved=None, error=None)


def reconcile_saved(state: WarBoardState, war_index: int,
                    saved_players: Iterable[PlayerRecord], revision: int) -> WarBoardState:
    """
    Adopt the server's copies after every request of a save succeeded.
    
    Only slot war_index is taken from the server; other slots keep their
    local values so unsaved edits to other wars survive. If the war was
    edited again while the save was in flight (revision moved on), the newer
    local values are kept and the war stays dirty.
    """
    saving = state.saving - {war_index}
    if state.revision(war_index) != revision:
        return replace(state, saving=saving)
    
    server_slots = {player.id: player.slot(war_index) for player in saved_players}
    players = tuple(
        p.with_slot(war_index, server_slots[p.id]) if p.id in server_slots else p
        for p in state.players
    )
    return replace(
        state,
        players=players,
        dirty=state.dirty - {war_index},
        saving=saving,
        saved=war_index,
    )


def fail_save(state: WarBoardState, war_index: int, message: str) -> WarBoardState:
    """Record one aggregate failure; the war stays dirty."""
    return replace(state, saving=state.saving - {war_index}, error=message)


def clear_saved_feedback(state: WarBoardState, war_index: int) -> WarBoardState:
    """End the transient "saved" feedback if it still belongs to this war."""
    if state.saved != war_index:
        return state
    return replace(state, saved=None)


def begin_reset(state: WarBoardState, war_index: int) -> WarBoardState:
    validate_war_index(war_index)
    if war_index in state.resetting:
        raise SaveInProgressError(war_index, action="reset")
    return replace(state, resetting=state.resetting | {war_index}, error=None)


def finish_reset(state: WarBoardState, war_index: int,
                 fetched_players: Iterable[PlayerRecord]) -> WarBoardState:
    """
    Replace local war data with the store's copy after a bulk reset.
    
    Every clean war and the reset war come from the store. Other dirty wars
    keep their local, not yet saved values for players still present.
    """
    local = {player.id: player for player in state.players}
    kept_dirty = state.dirty - {war_index}
    
    players = []
    for fetched in fetched_players:
        current = local.get(fetched.id)
        if current is not None:
            for index in kept_dirty:
                fetched = fetched.with_slot(index, current.slot(index))
        players.append(fetched)
    
    revisions = list(state.revisions)
    revisions[war_index] += 1
    
    return replace(
        state,
        players=tuple(players),
        dirty=kept_dirty,
        revisions=tuple(revisions),
        resetting=state.resetting - {war_index},
    )


def fail_reset(state: WarBoardState, war_index: int, message: str) -> WarBoardState:
    return replace(state, resetting=state.resetting - {war_index}, error=message)


def discard_on_logout(state: WarBoardState) -> WarBoardState:
    """Drop everything, unsaved edits included, when the session ends."""
    return WarBoardState()
