import asyncio
from typing import AsyncIterator, List, Optional, Sequence, Tuple

import pytest

from bbbank_forms.enums import OutcomeStatus
from bbbank_forms.exceptions import ExistenceCheckError
from bbbank_forms.models import ValidationOutcome
from bbbank_forms.validators.account_number import DebouncedValidator
from fakes import FakeExistenceCheck


DEBOUNCE_MS = 100


def collect(validator: DebouncedValidator) -> List[ValidationOutcome]:
    outcomes: List[ValidationOutcome] = []
    validator.subscribe(outcomes.append)
    return outcomes


def terminal(outcomes: List[ValidationOutcome]) -> List[ValidationOutcome]:
    return [outcome for outcome in outcomes if outcome.is_terminal]


async def typed(values: Sequence[Tuple[Optional[str], float]]) -> AsyncIterator[Optional[str]]:
    for value, pause in values:
        yield value
        await asyncio.sleep(pause)


@pytest.mark.asyncio
async def test_rapid_inputs_trigger_single_check_for_last_value(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)
    outcomes = collect(validator)

    for value in ["1", "12", "123"]:
        validator.submit(value)
        await asyncio.sleep(0.01)

    outcome = await validator.result()

    assert existence_check.calls == ["123"]
    assert outcome == ValidationOutcome.invalid("accountNumberExists")
    assert terminal(outcomes) == [outcome]


@pytest.mark.asyncio
async def test_existing_number_is_invalid(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    validator.submit("999")
    outcome = await validator.result()

    assert outcome.status == OutcomeStatus.INVALID
    assert outcome.reason == "accountNumberExists"
    assert outcome.to_errors() == {"accountNumberExists": True}


@pytest.mark.asyncio
async def test_unknown_number_is_valid(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    validator.submit("555")
    outcome = await validator.result()

    assert outcome == ValidationOutcome.valid()
    assert existence_check.calls == ["555"]


@pytest.mark.asyncio
async def test_pending_is_emitted_for_each_input(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)
    outcomes = collect(validator)

    validator.submit("5")
    validator.submit("55")
    assert outcomes == [ValidationOutcome.pending(), ValidationOutcome.pending()]
    assert validator.is_pending

    await validator.result()
    assert not validator.is_pending


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["", None])
async def test_empty_value_resolves_valid_without_remote_call(existence_check, value):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)
    outcomes = collect(validator)

    request = validator.submit(value)

    assert request.value == ""
    assert validator.outcome == ValidationOutcome.valid()
    assert outcomes == [ValidationOutcome.valid()]
    assert await validator.result() == ValidationOutcome.valid()
    assert existence_check.calls == []


@pytest.mark.asyncio
async def test_empty_value_is_checked_when_skip_disabled(existence_check):
    validator = DebouncedValidator(
        existence_check, debounce_ms=DEBOUNCE_MS, skip_empty=False
    )

    validator.submit("")
    outcome = await validator.result()

    assert outcome == ValidationOutcome.valid()
    assert existence_check.calls == [""]


@pytest.mark.asyncio
async def test_empty_value_cancels_pending_check(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)
    outcomes = collect(validator)

    validator.submit("999")
    validator.submit("")
    await asyncio.sleep(DEBOUNCE_MS / 1000 * 2)

    assert existence_check.calls == []
    assert terminal(outcomes) == [ValidationOutcome.valid()]


@pytest.mark.asyncio
async def test_collaborator_failure_yields_failed_outcome():
    check = FakeExistenceCheck(error=ExistenceCheckError("123", "server answered 500"))
    validator = DebouncedValidator(check, debounce_ms=DEBOUNCE_MS)

    validator.submit("123")
    outcome = await validator.result()

    assert outcome.status == OutcomeStatus.FAILED
    assert "server answered 500" in (outcome.error or "")
    assert outcome.to_errors() == {"accountNumberCheckFailed": True}


@pytest.mark.asyncio
async def test_late_response_of_superseded_check_is_dropped():
    check = FakeExistenceCheck(taken={"111"}, delays={"111": 0.3})
    validator = DebouncedValidator(
        check, debounce_ms=20, abort_in_flight=False
    )
    outcomes = collect(validator)

    validator.submit("111")
    await asyncio.sleep(0.1)
    assert check.calls == ["111"]

    validator.submit("222")
    outcome = await validator.result()
    assert outcome == ValidationOutcome.valid()

    await asyncio.sleep(0.35)

    assert check.completed == ["222", "111"]
    assert validator.outcome == ValidationOutcome.valid()
    assert terminal(outcomes) == [ValidationOutcome.valid()]


@pytest.mark.asyncio
async def test_superseded_in_flight_check_is_aborted():
    check = FakeExistenceCheck(taken={"111"}, delays={"111": 0.3})
    validator = DebouncedValidator(check, debounce_ms=20, abort_in_flight=True)
    outcomes = collect(validator)

    validator.submit("111")
    await asyncio.sleep(0.1)

    validator.submit("222")
    outcome = await validator.result()
    await asyncio.sleep(0)

    assert outcome == ValidationOutcome.valid()
    assert check.cancelled == ["111"]
    assert terminal(outcomes) == [ValidationOutcome.valid()]


@pytest.mark.asyncio
async def test_cancel_drops_pending_value(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)
    outcomes = collect(validator)

    validator.submit("999")
    validator.cancel()
    await asyncio.sleep(DEBOUNCE_MS / 1000 * 2)

    assert existence_check.calls == []
    assert validator.outcome is None
    assert terminal(outcomes) == []


@pytest.mark.asyncio
async def test_validate_stream_emits_only_last_settled_value(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    outcomes = [
        outcome
        async for outcome in validator.validate(
            typed([("9", 0.01), ("99", 0.01), ("999", 0)])
        )
    ]

    assert existence_check.calls == ["999"]
    assert outcomes[-1] == ValidationOutcome.invalid()
    assert terminal(outcomes) == [ValidationOutcome.invalid()]


@pytest.mark.asyncio
async def test_validate_stream_resolves_each_settled_value(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    outcomes = [
        outcome
        async for outcome in validator.validate(typed([("555", 0.3), ("999", 0)]))
    ]

    assert existence_check.calls == ["555", "999"]
    assert terminal(outcomes) == [
        ValidationOutcome.valid(),
        ValidationOutcome.invalid(),
    ]


@pytest.mark.asyncio
async def test_validate_stream_propagates_input_errors(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    async def broken() -> AsyncIterator[Optional[str]]:
        yield "555"
        raise RuntimeError("input closed")

    with pytest.raises(RuntimeError, match="input closed"):
        async for _ in validator.validate(broken()):
            pass


@pytest.mark.asyncio
async def test_result_requires_a_submitted_value(existence_check):
    validator = DebouncedValidator(existence_check, debounce_ms=DEBOUNCE_MS)

    with pytest.raises(RuntimeError):
        await validator.result()


def test_negative_debounce_is_rejected(existence_check):
    with pytest.raises(ValueError):
        DebouncedValidator(existence_check, debounce_ms=-1)
