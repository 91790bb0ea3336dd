from __future__ import annotations

from statemachine import State, StateMachine

from clicker.api.models import GameState


ACTIVE = "active"
PAUSED = "paused"


class SessionFSM(StateMachine):
    """Active/paused session machine around GameState.

    Only guards transitions; the engine applies timestamps and income.
    """

    active = State(ACTIVE, value=ACTIVE, initial=True)
    paused = State(PAUSED, value=PAUSED)

    pause = active.to(paused)
    resume = paused.to(active)

    def __init__(self, game: GameState):
        self.game = game
        super().__init__(start_value=ACTIVE if game.is_active_session else PAUSED)

    def sync_to_model(self) -> None:
        self.game.is_active_session = self.current_state == self.active
