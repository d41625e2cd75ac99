import logging
from collections import deque
from datetime import datetime
from typing import Deque, Dict, List, Set, Tuple

from waitmounts.core.exceptions import InvalidTransitionError
from waitmounts.models import MonitorState


class MonitorStateMachine:
    """
    Single gatekeeper for monitor state changes.

    This is the ONLY place that:
    1. Validates a state transition.
    2. Changes the current monitor state.
    3. Records the transition history.

    The monitor loop asks for transitions; it never assigns the state itself.
    """

    def __init__(self, history_size: int = 100):
        self._state = MonitorState.IDLE
        # Oldest transitions are dropped once history_size is reached
        self._history: Deque[Tuple[datetime, MonitorState, MonitorState]] = deque(
            maxlen=history_size
        )

        # All legal transitions for the mount dependency monitor
        self._transitions: Dict[MonitorState, Set[MonitorState]] = {
            MonitorState.IDLE: {
                MonitorState.WAITING,
                MonitorState.STOPPED,
            },
            MonitorState.WAITING: {
                MonitorState.RESTARTING,
                MonitorState.TIMED_OUT,
                MonitorState.STOPPED,
            },
            MonitorState.RESTARTING: {
                MonitorState.SURVEILLING,
                MonitorState.STOPPED,
            },
            MonitorState.SURVEILLING: {
                MonitorState.WAITING,  # A mount went away, new cycle
                MonitorState.STOPPED,
            },
            MonitorState.TIMED_OUT: {
                MonitorState.WAITING,  # Daemon mode retries
                MonitorState.STOPPED,
            },
            MonitorState.STOPPED: set(),
        }
        logging.debug(
            "MonitorStateMachine initialized with %s transition rules",
            len(self._transitions),
        )

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def history(self) -> List[Tuple[datetime, MonitorState, MonitorState]]:
        return list(self._history)

    def visited_states(self) -> List[MonitorState]:
        """Return target states in the order they were entered."""
        return [new_state for _, _, new_state in self._history]

    def can_transition(self, new_state: MonitorState) -> bool:
        return new_state in self._transitions.get(self._state, set())

    def transition(self, new_state: MonitorState) -> MonitorState:
        """
        Move to a new state.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        old_state = self._state
        if new_state == old_state:
            return old_state

        if not self.can_transition(new_state):
            raise InvalidTransitionError(old_state.value, new_state.value)

        logging.debug(f"Monitor transition: {old_state.value} -> {new_state.value}")
        self._state = new_state
        self._history.append((datetime.now(), old_state, new_state))
        return new_state
