"""
War board coordinator.

Drives the owner's editing session for one clan: local edits are tracked per
war in a WarBoardState, and an explicit save commits one war for every player
by fanning out one store request per player concurrently.

A save is all-or-nothing only from the owner's point of view. Each request
is committed independently by the store, so when some fail the others stay
committed; nothing is rolled back. The result lists every player's outcome
and the war stays dirty, so the owner retries the whole war (or just the
failed players via retry_failed). Resending is idempotent because each
request carries the player's full slot, not a diff.
"""

import asyncio
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, TYPE_CHECKING

from warboard.config import Config
from warboard.data_models.leaderboard import LeaderboardRow
from warboard.data_models.war import PlayerRecord
from warboard.state import working_state
from warboard.state.working_state import WarBoardState
from warboard.utils.exceptions import BatchSaveError, NotFoundError, SessionError
from warboard.utils.logger import setup_logger
from warboard.utils.ranking import RankingUtility

if TYPE_CHECKING:
    from warboard.operations.player_operations import PlayerOperations

logger = setup_logger(__name__)


@dataclass(frozen=True)
class PlayerSaveResult:
    """Outcome of one player's request within a batch save."""
    player_id: int
    player: Optional[PlayerRecord] = None
    error: Optional[BaseException] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class BatchSaveResult:
    """Per-player outcomes of saving one war."""
    war_index: int
    revision: int
    results: Tuple[PlayerSaveResult, ...]
    
    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)
    
    @property
    def succeeded(self) -> List[PlayerSaveResult]:
        return [result for result in self.results if result.ok]
    
    @property
    def failed(self) -> List[PlayerSaveResult]:
        return [result for result in self.results if not result.ok]
    
    @property
    def failed_player_ids(self) -> List[int]:
        return [result.player_id for result in self.failed]
    
    def raise_for_failure(self):
        """Raise one aggregate BatchSaveError if any request failed."""
        if not self.ok:
            raise BatchSaveError(self.war_index, len(self.failed), len(self.results))


class WarBoardCoordinator:
    """
    Owner-side editing session for one clan.
    
    The store is any object exposing the PlayerOperations coroutines
    (list_players, create_player, delete_player, update_war_slot,
    reset_war_slot_for_clan). All state changes go through the pure
    transitions in warboard.state.working_state; this class only sequences
    them around store calls.
    """
    
    def __init__(self, store: "PlayerOperations", clan_id: int,
                 saved_feedback_seconds: Optional[float] = None):
        self.store = store
        self.clan_id = clan_id
        self.saved_feedback_seconds = (
            Config.SAVED_FEEDBACK_SECONDS if saved_feedback_seconds is None else saved_feedback_seconds
        )
        self.state = WarBoardState()
        self._feedback_handles = {}
    
    async def refresh(self) -> WarBoardState:
        """Load the clan's players from the store into the working state."""
        players = await self._call_store(self.store.list_players(self.clan_id))
        self.state = working_state.load_players(self.state, players)
        return self.state
    
    async def create_player(self, name: str) -> PlayerRecord:
        player = await self._call_store(self.store.create_player(self.clan_id, name))
        self.state = working_state.add_player(self.state, player)
        return player
    
    async def delete_player(self, player_id: int):
        try:
            await self._call_store(self.store.delete_player(self.clan_id, player_id))
        except NotFoundError:
            # Already gone from the store; drop the stale local copy too
            self.state = working_state.remove_player(self.state, player_id)
            raise
        self.state = working_state.remove_player(self.state, player_id)
    
    def edit(self, player_id: int, war_index: int, field_name: str, raw_value) -> WarBoardState:
        """Clamp and apply one cell edit locally; nothing is sent to the store."""
        self.state = working_state.apply_edit(self.state, player_id, war_index, field_name, raw_value)
        return self.state
    
    def leaderboard(self) -> List[LeaderboardRow]:
        """Leaderboard of the current working state, unsaved edits included."""
        return RankingUtility.build_leaderboard(self.state.players)
    
    async def save_all(self, war_index: int, player_ids: Optional[Iterable[int]] = None) -> BatchSaveResult:
        """
        Commit one war for every player (or the given subset) concurrently.
        
        Args:
            war_index: War to save
            player_ids: Restrict the batch to these players; None means all
            
        Returns:
            BatchSaveResult with one entry per request sent
            
        Raises:
            SaveInProgressError: If this war is already being saved
            SessionError: If the owner's session expired; local state is discarded
        """
        self.state = working_state.begin_save(self.state, war_index)
        revision = self.state.revision(war_index)
        
        wanted = set(player_ids) if player_ids is not None else None
        targets = [p for p in self.state.players if wanted is None or p.id in wanted]
        
        logger.info(f"Saving war {war_index} for {len(targets)} players in clan {self.clan_id}")
        try:
            outcomes = await asyncio.gather(
                *(
                    self.store.update_war_slot(self.clan_id, player.id, war_index, player.slot(war_index))
                    for player in targets
                ),
                return_exceptions=True
            )
        except asyncio.CancelledError:
            self.state = working_state.fail_save(self.state, war_index, "Save was cancelled.")
            raise
        
        results = tuple(
            PlayerSaveResult(player_id=player.id, error=outcome)
            if isinstance(outcome, BaseException)
            else PlayerSaveResult(player_id=player.id, player=outcome)
            for player, outcome in zip(targets, outcomes)
        )
        batch = BatchSaveResult(war_index=war_index, revision=revision, results=results)
        
        session_errors = [r.error for r in batch.failed if isinstance(r.error, SessionError)]
        if session_errors:
            logger.warning(f"Session expired while saving war {war_index}; discarding unsaved edits")
            self.logout()
            raise session_errors[0]
        
        if not batch.ok:
            for failure in batch.failed:
                logger.warning(
                    f"War {war_index} save failed for player {failure.player_id}: {failure.error!r}"
                )
            error = BatchSaveError(war_index, len(batch.failed), len(batch.results))
            logger.error(str(error))
            self.state = working_state.fail_save(self.state, war_index, error.user_message)
            return batch
        
        self.state = working_state.reconcile_saved(
            self.state, war_index, [r.player for r in batch.succeeded], revision
        )
        if self.state.saved == war_index:
            self._schedule_saved_feedback(war_index)
        logger.info(f"Saved war {war_index} for {len(results)} players in clan {self.clan_id}")
        return batch
    
    async def retry_failed(self, batch: BatchSaveResult) -> BatchSaveResult:
        """
        Resend only the players that failed in a previous batch.
        
        Falls back to saving the whole war when it was edited or reset after
        that batch, since the players that succeeded then may be stale now.
        """
        if batch.ok:
            return batch
        if self.state.revision(batch.war_index) != batch.revision:
            logger.info(f"War {batch.war_index} changed since the failed save; resending all players")
            return await self.save_all(batch.war_index)
        return await self.save_all(batch.war_index, player_ids=batch.failed_player_ids)
    
    async def reset_war(self, war_index: int) -> WarBoardState:
        """
        Zero one war for the whole clan with a single store call, then re-fetch.
        
        Raises:
            SaveInProgressError: If a reset of this war is already running
            SessionError: If the owner's session expired; local state is discarded
        """
        self.state = working_state.begin_reset(self.state, war_index)
        try:
            await self.store.reset_war_slot_for_clan(self.clan_id, war_index)
            players = await self.store.list_players(self.clan_id)
        except SessionError:
            self.logout()
            raise
        except asyncio.CancelledError:
            self.state = working_state.fail_reset(self.state, war_index, "Reset was cancelled.")
            raise
        except Exception as e:
            message = getattr(e, "user_message", "Unable to reset war.")
            self.state = working_state.fail_reset(self.state, war_index, message)
            logger.error(f"Failed to reset war {war_index} for clan {self.clan_id}: {e}")
            raise
        
        self.state = working_state.finish_reset(self.state, war_index, players)
        logger.info(f"Reset war {war_index} for clan {self.clan_id}")
        return self.state
    
    def logout(self):
        """End the session: cancel pending feedback and drop all local edits."""
        for handle in self._feedback_handles.values():
            handle.cancel()
        self._feedback_handles.clear()
        self.state = working_state.discard_on_logout(self.state)
    
    async def _call_store(self, call):
        try:
            return await call
        except SessionError:
            self.logout()
            raise
    
    def _schedule_saved_feedback(self, war_index: int):
        handle = self._feedback_handles.pop(war_index, None)
        if handle is not None:
            handle.cancel()
        loop = asyncio.get_running_loop()
        self._feedback_handles[war_index] = loop.call_later(
            self.saved_feedback_seconds, self._clear_saved_feedback, war_index
        )
    
    def _clear_saved_feedback(self, war_index: int):
        self._feedback_handles.pop(war_index, None)
        self.state = working_state.clear_saved_feedback(self.state, war_index)
