import pytest

from warboard.data_models.war import WarSlot
from warboard.state import working_state
from warboard.state.working_state import WarBoardState
from warboard.utils.exceptions import NotFoundError, SaveInProgressError, ValidationError

from war_helpers import make_player, slot


@pytest.fixture
def state():
    return working_state.load_players(WarBoardState(), [
        make_player(1, "Ava", slot(1, 50, 0, 0)),
        make_player(2, "Ben"),
    ])


def test_edit_clamps_and_updates_only_that_cell(state):
    new_state = working_state.apply_edit(state, 1, 0, "attackStars", 9)

    assert new_state.get_player(1).slot(0) == slot(3, 50, 0, 0)
    assert new_state.get_player(2) == state.get_player(2)
    assert new_state.get_player(1).slot(1) == WarSlot.ZERO
    # Original value untouched
    assert state.get_player(1).slot(0).attack_stars == 1


def test_edit_with_garbage_becomes_zero(state):
    new_state = working_state.apply_edit(state, 1, 0, "attackPct", "abc")

    assert new_state.get_player(1).slot(0).attack_pct == 0


def test_edit_marks_war_dirty_and_bumps_revision(state):
    new_state = working_state.apply_edit(state, 2, 3, "defensePct", 40)

    assert new_state.dirty_flags() == {0: False, 1: False, 2: False, 3: True, 4: False, 5: False, 6: False}
    assert new_state.revision(3) == state.revision(3) + 1
    assert new_state.revision(0) == state.revision(0)


def test_edit_clears_saved_feedback_for_every_war(state):
    saved = working_state.reconcile_saved(
        working_state.begin_save(state, 5), 5, [], state.revision(5)
    )
    assert saved.saved == 5

    edited = working_state.apply_edit(saved, 1, 0, "attackStars", 2)

    assert edited.saved is None


def test_edit_unknown_player_or_field(state):
    with pytest.raises(NotFoundError):
        working_state.apply_edit(state, 99, 0, "attackStars", 1)
    with pytest.raises(ValidationError):
        working_state.apply_edit(state, 1, 0, "bogus", 1)
    with pytest.raises(ValidationError):
        working_state.apply_edit(state, 1, 7, "attackStars", 1)


def test_begin_save_refuses_same_war_twice(state):
    saving = working_state.begin_save(state, 2)

    with pytest.raises(SaveInProgressError):
        working_state.begin_save(saving, 2)

    both = working_state.begin_save(saving, 4)
    assert both.is_saving(2) and both.is_saving(4)


def test_reconcile_adopts_server_slot_and_clears_dirty(state):
    edited = working_state.apply_edit(state, 1, 0, "attackStars", 3)
    saving = working_state.begin_save(edited, 0)
    server_copy = make_player(1, "Ava", slot(3, 50, 0, 0))

    done = working_state.reconcile_saved(saving, 0, [server_copy], saving.revision(0))

    assert not done.is_dirty(0)
    assert not done.is_saving(0)
    assert done.saved == 0
    assert done.get_player(1).slot(0) == slot(3, 50, 0, 0)


def test_reconcile_keeps_edits_to_other_wars(state):
    edited = working_state.apply_edit(state, 1, 0, "attackStars", 3)
    saving = working_state.begin_save(edited, 0)
    during = working_state.apply_edit(saving, 1, 1, "attackPct", 77)
    # Server copy knows nothing about war 1 edits
    server_copy = make_player(1, "Ava", slot(3, 50, 0, 0))

    done = working_state.reconcile_saved(during, 0, [server_copy], saving.revision(0))

    assert done.get_player(1).slot(1).attack_pct == 77
    assert done.is_dirty(1)
    assert not done.is_dirty(0)


def test_reconcile_after_newer_edit_keeps_war_dirty(state):
    saving = working_state.begin_save(working_state.apply_edit(state, 1, 0, "attackStars", 2), 0)
    revision = saving.revision(0)
    newer = working_state.apply_edit(saving, 1, 0, "attackStars", 3)

    done = working_state.reconcile_saved(newer, 0, [make_player(1, "Ava", slot(2, 50, 0, 0))], revision)

    assert done.is_dirty(0)
    assert not done.is_saving(0)
    assert done.saved is None
    assert done.get_player(1).slot(0).attack_stars == 3


def test_fail_save_keeps_dirty_and_records_error(state):
    saving = working_state.begin_save(working_state.apply_edit(state, 1, 2, "attackStars", 1), 2)

    failed = working_state.fail_save(saving, 2, "Unable to save war data.")

    assert failed.is_dirty(2)
    assert not failed.is_saving(2)
    assert failed.error == "Unable to save war data."
    assert working_state.begin_save(failed, 2).error is None


def test_clear_saved_feedback_only_for_matching_war(state):
    saved = working_state.reconcile_saved(working_state.begin_save(state, 1), 1, [], state.revision(1))

    assert working_state.clear_saved_feedback(saved, 2).saved == 1
    assert working_state.clear_saved_feedback(saved, 1).saved is None


def test_finish_reset_keeps_unsaved_edits_of_other_wars(state):
    edited = working_state.apply_edit(state, 1, 0, "defenseStars", 2)
    edited = working_state.apply_edit(edited, 2, 4, "attackStars", 3)
    resetting = working_state.begin_reset(edited, 0)
    fetched = [make_player(1, "Ava"), make_player(2, "Ben")]

    done = working_state.finish_reset(resetting, 0, fetched)

    assert not done.is_resetting(0)
    assert not done.is_dirty(0)
    assert done.is_dirty(4)
    assert done.get_player(1).slot(0) == WarSlot.ZERO
    assert done.get_player(2).slot(4).attack_stars == 3
    assert done.revision(0) == resetting.revision(0) + 1


def test_begin_reset_refuses_same_war_twice(state):
    with pytest.raises(SaveInProgressError):
        working_state.begin_reset(working_state.begin_reset(state, 3), 3)


def test_player_set_transitions(state):
    added = working_state.add_player(state, make_player(3, "Cy"))
    assert [p.name for p in added.players] == ["Ava", "Ben", "Cy"]

    removed = working_state.remove_player(added, 1)
    assert [p.name for p in removed.players] == ["Ben", "Cy"]


def test_discard_on_logout_drops_everything(state):
    edited = working_state.begin_save(working_state.apply_edit(state, 1, 0, "attackStars", 3), 0)

    cleared = working_state.discard_on_logout(edited)

    assert cleared.players == ()
    assert not cleared.dirty
    assert not cleared.saving
    assert cleared == WarBoardState()
