from typing import Set

from robosim.enums.run_status import RunStatus


class IllegalStateSwitchException(Exception):
    def __init__(self, state: RunStatus, event: str, valid_events: Set[str]):
        self.state: RunStatus = state
        self.event: str = event
        self.valid_events: Set[str] = valid_events

        message: str = (
            f"Event '{event}' invalid from {state.name}. Valid: {sorted(valid_events)}"
        )
        super().__init__(message)
