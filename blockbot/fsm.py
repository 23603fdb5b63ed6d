from __future__ import annotations

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed


class RunInProgressError(ValueError):
    """Raised when a run (or a state reset) is requested while a run is active."""


class RunFSM(StateMachine):
    """Lifecycle of the interpreter on one context: idle <-> running.

    The FSM only guards transitions; the interpreter owns the actor updates.
    """

    idle = State("idle", value="idle", initial=True)
    running = State("running", value="running")

    start = idle.to(running)
    stop = running.to(idle)

    @property
    def is_running(self) -> bool:
        return self.running.is_active

    def begin(self) -> None:
        try:
            self.start()
        except TransitionNotAllowed as e:
            raise RunInProgressError("A run is already in progress") from e

    def end(self) -> None:
        if self.is_running:
            self.stop()
