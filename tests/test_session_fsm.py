from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from clicker.api.models import GameState
from clicker.fsm import SessionFSM


def test_fsm_starts_from_model_flag() -> None:
    assert SessionFSM(GameState()).current_state.id == "active"
    assert SessionFSM(GameState(is_active_session=False)).current_state.id == "paused"


def test_pause_then_resume_syncs_model() -> None:
    state = GameState()
    fsm = SessionFSM(state)

    fsm.pause()
    fsm.sync_to_model()
    assert state.is_active_session is False

    fsm.resume()
    fsm.sync_to_model()
    assert state.is_active_session is True


def test_double_pause_is_rejected() -> None:
    fsm = SessionFSM(GameState(is_active_session=False))

    with pytest.raises(TransitionNotAllowed):
        fsm.pause()
