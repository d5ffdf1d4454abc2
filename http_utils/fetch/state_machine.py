"""State machine for a single request execution."""

from enum import Enum

import structlog

from http_utils.constants import COMPONENT_FETCH


logger = structlog.get_logger()


class RequestState(str, Enum):
    """State of a request during one execution.

    - BUILT: Request object exists, nothing sent yet
    - AUTHORIZING: Auth strategy is attaching credentials
    - SENDING: Request handed to the transport
    - AWAITING_RESPONSE: Response headers received
    - TIMED_OUT: Deadline fired before the response arrived
    - STATUS_CHECKING: Matching the status against the accept rules
    - BODY_EMPTY: Response has no body
    - STREAMING_BODY: Body is being pushed to the writer
    - DONE: Completed successfully
    - FAILED: Failed with error
    """

    BUILT = "BUILT"
    AUTHORIZING = "AUTHORIZING"
    SENDING = "SENDING"
    AWAITING_RESPONSE = "AWAITING_RESPONSE"
    TIMED_OUT = "TIMED_OUT"
    STATUS_CHECKING = "STATUS_CHECKING"
    BODY_EMPTY = "BODY_EMPTY"
    STREAMING_BODY = "STREAMING_BODY"
    DONE = "DONE"
    FAILED = "FAILED"


_VALID_TRANSITIONS: dict[RequestState, set[RequestState]] = {
    RequestState.BUILT: {RequestState.AUTHORIZING, RequestState.FAILED},
    RequestState.AUTHORIZING: {RequestState.SENDING, RequestState.FAILED},
    RequestState.SENDING: {
        RequestState.AWAITING_RESPONSE,
        RequestState.TIMED_OUT,
        RequestState.FAILED,
    },
    RequestState.AWAITING_RESPONSE: {
        RequestState.STATUS_CHECKING,
        RequestState.FAILED,
    },
    RequestState.TIMED_OUT: {RequestState.FAILED},
    RequestState.STATUS_CHECKING: {
        RequestState.BODY_EMPTY,
        RequestState.STREAMING_BODY,
        RequestState.FAILED,
    },
    RequestState.BODY_EMPTY: {RequestState.DONE, RequestState.FAILED},
    RequestState.STREAMING_BODY: {RequestState.DONE, RequestState.FAILED},
    RequestState.DONE: set(),  # Terminal state
    RequestState.FAILED: set(),  # Terminal state
}


class RequestStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(
        self,
        url: str,
        from_state: RequestState,
        to_state: RequestState,
    ) -> None:
        """Initialize the transition error.

        Args:
            url: Target URL of the request.
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.url = url
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal state transition for request '{url}': "
            f"{from_state.value} -> {to_state.value}"
        )


class RequestStateMachine:
    """Tracks one execution of a request and logs every state change."""

    def __init__(
        self,
        url: str,
        initial_state: RequestState = RequestState.BUILT,
    ) -> None:
        """Initialize the state machine.

        Args:
            url: Redacted target URL, used for logging.
            initial_state: Starting state.
        """
        self._url = url
        self._state = initial_state
        self._log = logger.bind(component=COMPONENT_FETCH, url=url)

    @property
    def url(self) -> str:
        """Get the request URL."""
        return self._url

    @property
    def state(self) -> RequestState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RequestState.DONE, RequestState.FAILED)

    def can_transition_to(self, target: RequestState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RequestState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RequestStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RequestStateTransitionError(
                url=self._url,
                from_state=self._state,
                to_state=target,
            )

        old_state = self._state
        self._state = target

        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def fail(self) -> None:
        """Move to FAILED unless the execution already finished."""
        if not self.is_terminal:
            self.transition_to(RequestState.FAILED)
