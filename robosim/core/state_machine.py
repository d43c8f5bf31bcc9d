from typing import Dict

from robosim.enums.run_status import RunStatus as State, RunStatus
from robosim.exceptions.state_exceptions import IllegalStateSwitchException


class StateMachine:
    """Lifecycle of a single simulation run."""

    def __init__(self):
        self.__state: State = State.PENDING
        self.__transitions: Dict[State, Dict[str, State]] = {
            State.PENDING: {"start": State.RUNNING, "fail": State.FAILED},
            State.RUNNING: {"complete": State.COMPLETED, "fail": State.FAILED},
            State.COMPLETED: {},
            State.FAILED: {},
        }

    def trigger(self, event: str) -> bool:
        if event in self.__transitions[self.__state]:
            self.__state = self.__transitions[self.__state][event]
            return True
        else:
            raise IllegalStateSwitchException(
                self.__state, event, set(self.__transitions[self.__state].keys())
            )

    def get_state(self) -> RunStatus:
        return self.__state
