import asyncio
import logging
from typing import (
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Set,
)

from bbbank_forms.enums import ValidationErrorCode
from bbbank_forms.models.validation import ValidationOutcome, ValidationRequest
from bbbank_forms.settings import settings


logger = logging.getLogger("bbbank.forms")

ExistenceCheck = Callable[[str], Awaitable[bool]]
OutcomeListener = Callable[[ValidationOutcome], None]
AsyncValidatorFn = Callable[[Optional[str]], Awaitable[Optional[Dict[str, bool]]]]


class ExistenceCheckClient(Protocol):
    async def account_number_exists(self, account_number: str) -> bool: ...


class DebouncedValidator:
    """
    Validates values that must not already exist remotely, waiting for input to settle first.

    Every submitted value restarts the debounce window. Once the window elapses
    without a newer value, ``existence_check`` is awaited with the settled value:
    ``True`` produces an invalid outcome, ``False`` a valid one and an exception a
    failed one. A newer value supersedes the pending timer and any dispatched
    check, and results are only applied when their request is still the current
    one, so a late response can never replace the outcome of a newer value.

    Parameters:
    - existence_check: Coroutine function answering whether a value is taken.
    - debounce_ms (int): Quiet period before a value is checked.
    - skip_empty (bool): Resolve empty values as valid without a remote call.
    - abort_in_flight (bool): Cancel the task of a superseded check instead of
      letting it run to completion and discarding its result.
    - reason (str): Error code carried by invalid outcomes.
    """

    def __init__(
        self,
        existence_check: ExistenceCheck,
        debounce_ms: Optional[int] = None,
        skip_empty: Optional[bool] = None,
        abort_in_flight: Optional[bool] = None,
        reason: str = ValidationErrorCode.ACCOUNT_NUMBER_EXISTS.value,
    ) -> None:
        self.debounce_ms = settings.DEBOUNCE_MS if debounce_ms is None else debounce_ms
        if self.debounce_ms < 0:
            raise ValueError("debounce_ms must not be negative")

        self.skip_empty = settings.SKIP_EMPTY_VALUES if skip_empty is None else skip_empty
        self.abort_in_flight = (
            settings.ABORT_IN_FLIGHT if abort_in_flight is None else abort_in_flight
        )
        self.reason = reason
        self.outcome: Optional[ValidationOutcome] = None

        self._existence_check = existence_check
        self._sequence = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._check: Optional["asyncio.Task[None]"] = None
        self._detached: Set["asyncio.Task[None]"] = set()
        self._listeners: List[OutcomeListener] = []
        self._settled = asyncio.Event()

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def is_pending(self) -> bool:
        return self._timer is not None or (
            self._check is not None and not self._check.done()
        )

    def subscribe(self, listener: OutcomeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def submit(self, value: Optional[str]) -> ValidationRequest:
        """Feed a new input value. Must be called from a running event loop."""
        self._sequence += 1
        request = ValidationRequest(value=value or "", sequence=self._sequence)
        self._supersede()
        self._settled.clear()

        if not request.value and self.skip_empty:
            self._apply(request, ValidationOutcome.valid())
            return request

        self._emit(ValidationOutcome.pending())
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_ms / 1000, self._dispatch, request)

        return request

    def cancel(self) -> None:
        """Drop the pending value without emitting anything for it.

        Callers waiting on ``result`` for the dropped value keep waiting for the
        next submitted one.
        """
        self._sequence += 1
        self._supersede()

    async def result(self) -> ValidationOutcome:
        """Wait for the terminal outcome of the most recently submitted value."""
        if self._sequence == 0:
            raise RuntimeError("No value has been submitted")

        while True:
            sequence = self._sequence
            await self._settled.wait()
            if sequence == self._sequence and self.outcome is not None:
                return self.outcome

    async def validate(
        self, values: AsyncIterable[Optional[str]]
    ) -> AsyncIterator[ValidationOutcome]:
        """Turn a stream of input values into a stream of outcomes.

        The stream ends once the input is exhausted and the last value has
        resolved.
        """
        queue: "asyncio.Queue[Optional[ValidationOutcome]]" = asyncio.Queue()
        unsubscribe = self.subscribe(queue.put_nowait)

        async def feed() -> None:
            submitted = False
            try:
                async for value in values:
                    self.submit(value)
                    submitted = True

                if submitted:
                    await self.result()
            finally:
                queue.put_nowait(None)

        feeder = asyncio.create_task(feed())
        try:
            while True:
                outcome = await queue.get()
                if outcome is None:
                    break

                yield outcome

            await feeder
        finally:
            unsubscribe()
            if not feeder.done():
                feeder.cancel()
            if self.is_pending:
                self.cancel()

    def _supersede(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._check is not None and not self._check.done():
            if self.abort_in_flight:
                self._check.cancel()
            else:
                self._detached.add(self._check)
                self._check.add_done_callback(self._detached.discard)

        self._check = None

    def _dispatch(self, request: ValidationRequest) -> None:
        self._timer = None
        self._check = asyncio.create_task(self._run_check(request))

    async def _run_check(self, request: ValidationRequest) -> None:
        try:
            exists = await self._existence_check(request.value)
        except Exception as e:
            logger.warning("Existence check for '%s' failed: %s", request.value, e)
            outcome = ValidationOutcome.failed(str(e) or type(e).__name__)
        else:
            outcome = (
                ValidationOutcome.invalid(self.reason)
                if exists is True
                else ValidationOutcome.valid()
            )

        self._apply(request, outcome)

    def _apply(self, request: ValidationRequest, outcome: ValidationOutcome) -> None:
        if request.sequence != self._sequence:
            logger.debug(
                "Dropping %s outcome of superseded value '%s'",
                outcome.status.value,
                request.value,
            )
            return

        self.outcome = outcome
        self._settled.set()
        self._emit(outcome)

    def _emit(self, outcome: ValidationOutcome) -> None:
        for listener in list(self._listeners):
            listener(outcome)


class AccountNumberValidator:
    """Async form validator rejecting account numbers that are already taken."""

    def __init__(
        self,
        client: ExistenceCheckClient,
        debounce_ms: Optional[int] = None,
        skip_empty: Optional[bool] = None,
        abort_in_flight: Optional[bool] = None,
    ) -> None:
        self.validator = DebouncedValidator(
            client.account_number_exists,
            debounce_ms=debounce_ms,
            skip_empty=skip_empty,
            abort_in_flight=abort_in_flight,
        )

    async def validate(self, value: Optional[str]) -> Optional[Dict[str, bool]]:
        self.validator.submit(value)
        outcome = await self.validator.result()

        return outcome.to_errors()


def existing_account_number_validator(
    client: ExistenceCheckClient,
    debounce_ms: Optional[int] = None,
    skip_empty: Optional[bool] = None,
    abort_in_flight: Optional[bool] = None,
) -> AsyncValidatorFn:
    return AccountNumberValidator(
        client,
        debounce_ms=debounce_ms,
        skip_empty=skip_empty,
        abort_in_flight=abort_in_flight,
    ).validate
