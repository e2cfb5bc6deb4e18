"""
Test suite for the GenerationRunner state machine

Drives every transition with a scripted fake model and checks the two
global guarantees: the returned payload always passes the contract, and
the model is called at most twice.

Run with:
    pytest pipeline/tests/test_generation_runner.py -v
"""

import asyncio
from dataclasses import replace

import pytest

from pipeline import create_generation_pipeline
from pipeline.core.exceptions import MalformedModelOutput
from pipeline.core.runner import GenerationRunner
from pipeline.models.core import Provenance
from pipeline.steps.contract_validator import rules, validate_output

DUPLICATE_PARAGRAPH = "Any suite forecasted to remain available would be lovely."
DEMAND_PARAGRAPH = "I understand demand is high this week."


@pytest.fixture
def valid_output(make_output):
    return make_output()


@pytest.fixture
def scenario_a_output(make_output):
    return make_output(subject="Stay update")


@pytest.fixture
def scenario_b_output(make_output, make_body):
    return make_output(body=make_body(126, extra_paragraph=DEMAND_PARAGRAPH))


@pytest.fixture
def scenario_c_output(make_output, make_body):
    return make_output(body=make_body(205, extra_paragraph=DUPLICATE_PARAGRAPH))


async def run(generator, generation_input, **runner_kwargs):
    runner = GenerationRunner(generator, **runner_kwargs)
    result = await runner.run(generation_input, request_id="req-123")
    assert validate_output(result.output).ok
    assert result.record.model_calls <= 2
    assert generator.calls == result.record.model_calls
    return result


# ===================================================================
# TERMINAL STATES
# ===================================================================

@pytest.mark.asyncio
async def test_valid_first_pass(scripted_generator, generation_input, valid_output):
    generator = scripted_generator(valid_output)

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FIRST
    assert result.output == valid_output
    assert generator.calls == 1
    assert result.request_id == "req-123"
    assert result.record.provenance is Provenance.FIRST


@pytest.mark.asyncio
async def test_scenario_a_corrected_on_second_pass(
    scripted_generator, generation_input, scenario_a_output, valid_output
):
    generator = scripted_generator(scenario_a_output, valid_output)

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.SECOND
    assert generator.calls == 2

    correction_prompt = generator.prompts[1]
    for reason in result.record.stage_reasons["pass1"]:
        assert reason in correction_prompt
    assert generator.prompts[0] in correction_prompt
    assert result.record.stage_reasons["pass2"] == []


@pytest.mark.asyncio
async def test_scenario_c_repaired_after_second_pass(scripted_generator, generation_input, scenario_c_output):
    generator = scripted_generator(scenario_c_output, scenario_c_output)

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.REPAIRED
    assert result.record.applied_repairs == ["Replaced duplicate required phrase"]
    assert rules.REQUIRED_PHRASE_SYNONYM in result.output.body
    assert result.record.stage_reasons["repair"] == []


@pytest.mark.asyncio
async def test_scenario_b_falls_back(scripted_generator, generation_input, scenario_b_output):
    generator = scripted_generator(scenario_b_output, scenario_b_output)

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FALLBACK
    assert generator.calls == 2
    assert result.record.applied_repairs == []
    pass2_keys = [reason.split(":")[0] for reason in result.record.stage_reasons["pass2"]]
    assert rules.REASON_BODY_WORD_COUNT_LOW in pass2_keys
    assert rules.REASON_BODY_BANNED in pass2_keys
    # Personalized fallback for a parseable stay
    assert "Harbor View Hotel" in result.output.body


@pytest.mark.asyncio
async def test_repair_output_still_invalid_falls_back(
    scripted_generator, generation_input, make_output, make_body
):
    # Duplicate phrase is repairable, the banned word is not
    bad = make_output(body=make_body(190, extra_paragraph=f"{DUPLICATE_PARAGRAPH} {DEMAND_PARAGRAPH}"))
    generator = scripted_generator(bad, bad)

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FALLBACK
    assert result.record.applied_repairs == ["Replaced duplicate required phrase"]
    assert any(r.startswith(rules.REASON_BODY_BANNED) for r in result.record.stage_reasons["repair"])


# ===================================================================
# UPSTREAM FAILURES
# ===================================================================

@pytest.mark.asyncio
async def test_first_call_exception_falls_back(scripted_generator, generation_input):
    generator = scripted_generator(RuntimeError("provider unavailable"))

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FALLBACK
    assert generator.calls == 1
    assert "provider unavailable" in result.record.upstream_error


@pytest.mark.asyncio
async def test_second_call_exception_falls_back(scripted_generator, generation_input, scenario_a_output):
    generator = scripted_generator(scenario_a_output, ConnectionError("reset by peer"))

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FALLBACK
    assert generator.calls == 2


@pytest.mark.asyncio
async def test_malformed_output_falls_back(scripted_generator, generation_input):
    generator = scripted_generator(MalformedModelOutput("Invalid JSON response from model"))

    result = await run(generator, generation_input)

    assert result.provenance is Provenance.FALLBACK
    assert "Invalid JSON" in result.record.upstream_error


@pytest.mark.asyncio
async def test_timeout_falls_back(generation_input, valid_output):
    class SlowGenerator:
        calls = 0

        async def __call__(self, prompt):
            self.calls += 1
            await asyncio.sleep(5)
            return valid_output

    generator = SlowGenerator()

    result = await run(generator, generation_input, timeout=0.01)

    assert result.provenance is Provenance.FALLBACK
    assert "timed out" in result.record.upstream_error


@pytest.mark.asyncio
async def test_unparseable_dates_use_static_fallback(scripted_generator, generation_input):
    generator = scripted_generator(RuntimeError("boom"))

    result = await run(generator, replace(generation_input, checkin="soon"))

    assert result.provenance is Provenance.FALLBACK
    assert result.output.body.startswith("Hello [Hotel Team],")


# ===================================================================
# CORRECTION PASS DISABLED
# ===================================================================

@pytest.mark.asyncio
async def test_disabled_correction_goes_straight_to_repair(
    scripted_generator, generation_input, scenario_c_output
):
    generator = scripted_generator(scenario_c_output)

    result = await run(generator, generation_input, correction_pass_enabled=False)

    assert result.provenance is Provenance.REPAIRED
    assert generator.calls == 1
    assert "pass2" not in result.record.stage_reasons


@pytest.mark.asyncio
async def test_disabled_correction_unrepairable_falls_back(
    scripted_generator, generation_input, scenario_a_output
):
    # The date preface makes this subject even longer, so repair cannot fix it
    too_long = scenario_a_output.with_changes(
        subject="A very long subject line that keeps going well past the twelve word limit"
    )
    generator = scripted_generator(too_long)

    result = await run(generator, generation_input, correction_pass_enabled=False)

    assert result.provenance is Provenance.FALLBACK
    assert generator.calls == 1


# ===================================================================
# PROPERTIES
# ===================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("fixture_names", [
    ("valid_output",),
    ("scenario_a_output", "valid_output"),
    ("scenario_a_output", "scenario_a_output"),
    ("scenario_b_output", "scenario_b_output"),
    ("scenario_c_output", "scenario_c_output"),
    ("scenario_b_output", "scenario_c_output"),
])
async def test_output_always_valid_and_calls_capped(
    request, scripted_generator, generation_input, fixture_names
):
    outputs = [request.getfixturevalue(name) for name in fixture_names]
    generator = scripted_generator(*outputs)

    result = await run(generator, generation_input)

    assert result.provenance in set(Provenance) - {Provenance.ERROR}
    assert set(result.record.stage_timings) <= {"pass1", "pass2", "repair", "fallback"}


@pytest.mark.asyncio
async def test_runner_generates_request_id(scripted_generator, generation_input, valid_output):
    runner = GenerationRunner(scripted_generator(valid_output))

    result = await runner.run(generation_input)

    assert result.request_id
    assert result.record.total_duration() >= 0


@pytest.mark.unit
def test_factory_wires_settings(scripted_generator):
    from config.settings import settings

    generator = scripted_generator()
    runner = create_generation_pipeline(generator)

    assert runner.generator is generator
    assert runner.timeout == settings.generation_timeout_seconds
    assert runner.correction_pass_enabled is settings.correction_pass_enabled
