"""
Invocation State
Per-card status tracking for the dashboard: idle -> loading -> success | error.

Every card (unit) is keyed by its id. Updates only ever touch one key, and all of them
happen on the event loop thread, so there is no locking.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from cloudlab.errors import LabError, RequestFailed

logger = logging.getLogger(__name__)


class InvocationStatus(str, Enum):
    IDLE = "IDLE"
    LOADING = "LOADING"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


@dataclass
class InvocationState:
    status: InvocationStatus = InvocationStatus.IDLE
    output: Any = ""
    error_kind: Optional[str] = None
    # Bumped on every run; a completion only lands if it still matches
    run_id: int = 0

    @property
    def is_loading(self):
        return self.status is InvocationStatus.LOADING


class InvocationBoard:
    """
    Owns the unit id -> state and unit id -> input maps for one view.
    """

    def __init__(self):
        self._states: Dict[str, InvocationState] = {}
        self._inputs: Dict[str, str] = {}
        self._defaults: Dict[str, str] = {}

    def __contains__(self, unit_id):
        return unit_id in self._states

    def register(self, unit_id, default_input=""):
        if unit_id not in self._states:
            self._states[unit_id] = InvocationState()
            self._defaults[unit_id] = default_input
        return self._states[unit_id]

    def remove(self, unit_id):
        self._states.pop(unit_id, None)
        self._inputs.pop(unit_id, None)
        self._defaults.pop(unit_id, None)

    def set_input(self, unit_id, value):
        self._inputs[unit_id] = value

    def input_for(self, unit_id):
        if unit_id in self._inputs:
            return self._inputs[unit_id]
        return self._defaults.get(unit_id, "")

    def state(self, unit_id):
        return self._states.get(unit_id) or InvocationState()

    def is_loading(self, unit_id):
        return self.state(unit_id).is_loading

    async def run_test(self, unit_id, handler):
        """
        Runs `handler(input)` for one unit and records the outcome on that unit only.

        A call while the unit is already loading is ignored. If the unit is removed (or
        re-registered) before the handler settles, the result is dropped.
        """
        state = self.register(unit_id)
        if state.is_loading:
            logger.debug("Ignoring run for %s: already loading", unit_id)
            return state

        state.run_id += 1
        ticket = state.run_id
        state.status = InvocationStatus.LOADING
        state.output = ""
        state.error_kind = None

        try:
            output = await handler(self.input_for(unit_id))
        except LabError as e:
            logger.warning("Invocation %s failed: %s: %s", unit_id, type(e).__name__, e)
            return self._settle(unit_id, state, ticket, InvocationStatus.ERROR, e.user_message, type(e).__name__)
        except Exception:
            logger.exception("Unexpected error in invocation %s", unit_id)
            return self._settle(
                unit_id, state, ticket, InvocationStatus.ERROR, RequestFailed.user_message, RequestFailed.__name__
            )

        return self._settle(unit_id, state, ticket, InvocationStatus.SUCCESS, output)

    def _settle(self, unit_id, state, ticket, status, output, error_kind=None):
        if self._states.get(unit_id) is not state or state.run_id != ticket:
            logger.debug("Discarding result for removed unit %s", unit_id)
            return state
        state.status = status
        state.output = output
        state.error_kind = error_kind
        return state
