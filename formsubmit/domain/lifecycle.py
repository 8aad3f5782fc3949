from __future__ import annotations

from enum import StrEnum


class SubmitState(StrEnum):
    START = "start"
    DOR_DECISION = "dor_decision"
    RENDER = "render"
    ATTACH = "attach"
    DISPATCH = "dispatch"
    FAILURE = "failure"
    DONE = "done"


ALLOWED_TRANSITIONS: dict[SubmitState, set[SubmitState]] = {
    SubmitState.START: {SubmitState.DOR_DECISION, SubmitState.FAILURE},
    SubmitState.DOR_DECISION: {SubmitState.RENDER, SubmitState.DISPATCH, SubmitState.FAILURE},
    SubmitState.RENDER: {SubmitState.ATTACH, SubmitState.DISPATCH, SubmitState.FAILURE},
    SubmitState.ATTACH: {SubmitState.DISPATCH, SubmitState.FAILURE},
    SubmitState.DISPATCH: {SubmitState.DONE, SubmitState.FAILURE},
    SubmitState.FAILURE: {SubmitState.DONE},
    SubmitState.DONE: set(),
}


def is_allowed_transition(*, from_state: SubmitState, to_state: SubmitState) -> bool:
    return to_state in ALLOWED_TRANSITIONS.get(from_state, set())
