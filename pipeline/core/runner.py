"""
Core pipeline infrastructure - the generation state machine.

GenerationRunner: drives PASS1 -> PASS2 -> REPAIR -> DONE and always
returns a payload that passes the output contract.
"""

import asyncio
import time
import uuid
from typing import Awaitable, Callable, List, Optional

import logfire

from pipeline.core.exceptions import UpstreamGenerationFailure
from pipeline.models.core import (
    GenerationInput,
    GenerationRecord,
    GenerationResult,
    GenerationStage,
    OutputContract,
    Provenance,
)
from pipeline.steps.contract_validator import validate_output
from pipeline.steps.fallback import resolve_fallback
from pipeline.steps.repair import repair_output
from pipeline.steps.request_composer.prompts import (
    create_correction_prompt,
    create_generation_prompt,
)
from pipeline.steps.request_composer.utils import format_stay_dates

# Async callable turning a prompt into a parsed payload (one model call)
Generator = Callable[[str], Awaitable[OutputContract]]

MAX_MODEL_CALLS = 2


class GenerationRunner:
    """
    Orchestrates validation, one correction pass, repair and fallback.

    Transitions:
        PASS1  --valid-->            DONE(first)
        PASS1  --invalid-->          PASS2 (or REPAIR when correction is off)
        PASS2  --valid-->            DONE(second)
        PASS2  --invalid-->          REPAIR
        REPAIR --valid-->            DONE(repaired)
        REPAIR --invalid or no-op--> FALLBACK
        model error or timeout  -->  FALLBACK
        FALLBACK                -->  DONE(fallback)

    The runner is the only component that logs request ids and provenance.
    It never raises, except FallbackUnavailableError when the static
    fallback itself is broken.
    """

    def __init__(
        self,
        generator: Generator,
        timeout: Optional[float] = 30.0,
        correction_pass_enabled: bool = True,
    ):
        """
        Args:
            generator: Model-call collaborator (prompt -> OutputContract)
            timeout: Seconds allowed for each model call (None disables)
            correction_pass_enabled: When False an invalid first pass goes
                straight to repair
        """
        self.generator = generator
        self.timeout = timeout
        self.correction_pass_enabled = correction_pass_enabled

    async def _call_model(self, prompt: str, record: GenerationRecord) -> OutputContract:
        """
        Make one bounded model call.

        Raises:
            UpstreamGenerationFailure: On any error or timeout
        """
        if record.model_calls >= MAX_MODEL_CALLS:
            raise UpstreamGenerationFailure("Model call budget exhausted")

        record.model_calls += 1
        try:
            return await asyncio.wait_for(self.generator(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamGenerationFailure(f"Model call timed out after {self.timeout}s") from e
        except UpstreamGenerationFailure:
            raise
        except Exception as e:
            raise UpstreamGenerationFailure(f"{type(e).__name__}: {e}") from e

    async def run(
        self,
        generation_input: GenerationInput,
        request_id: Optional[str] = None
    ) -> GenerationResult:
        """
        Run the state machine for one request.

        Args:
            generation_input: Sanitized booking and context
            request_id: Correlation id (generated when omitted)

        Returns:
            GenerationResult whose output always passes validate_output()

        Raises:
            FallbackUnavailableError: If the static fallback payload is invalid
        """
        record = GenerationRecord(request_id=request_id or str(uuid.uuid4()))
        stay_dates = format_stay_dates(generation_input.checkin, generation_input.checkout)
        prompt = create_generation_prompt(generation_input)

        stage = GenerationStage.PASS1
        current: Optional[OutputContract] = None
        reasons: List[str] = []
        provenance: Optional[Provenance] = None

        with logfire.span(
            "pipeline.generate_request",
            request_id=record.request_id,
            hotel=generation_input.hotel
        ):
            while stage is not GenerationStage.DONE:
                stage_start = time.perf_counter()
                stage_name = stage.value

                if stage in (GenerationStage.PASS1, GenerationStage.PASS2):
                    stage_prompt = prompt
                    if stage is GenerationStage.PASS2:
                        stage_prompt = create_correction_prompt(prompt, reasons)

                    try:
                        current = await self._call_model(stage_prompt, record)
                    except UpstreamGenerationFailure as e:
                        record.upstream_error = str(e)
                        logfire.warning(
                            "Model call failed, using fallback",
                            request_id=record.request_id,
                            stage=stage_name,
                            error=str(e)
                        )
                        stage = GenerationStage.FALLBACK
                    else:
                        validation = validate_output(current)
                        reasons = validation.reasons
                        record.stage_reasons[stage_name] = list(reasons)

                        if validation.ok:
                            provenance = (
                                Provenance.FIRST if stage is GenerationStage.PASS1
                                else Provenance.SECOND
                            )
                            stage = GenerationStage.DONE
                        else:
                            logfire.info(
                                "Output failed contract",
                                request_id=record.request_id,
                                stage=stage_name,
                                reasons=reasons
                            )
                            if stage is GenerationStage.PASS1 and self.correction_pass_enabled:
                                stage = GenerationStage.PASS2
                            else:
                                stage = GenerationStage.REPAIR

                elif stage is GenerationStage.REPAIR:
                    outcome = repair_output(current, reasons, stay_dates=stay_dates)
                    record.applied_repairs = list(outcome.applied_repairs)
                    stage = GenerationStage.FALLBACK

                    if outcome.changed:
                        revalidation = validate_output(outcome.patched)
                        record.stage_reasons[stage_name] = list(revalidation.reasons)
                        if revalidation.ok:
                            current = outcome.patched
                            provenance = Provenance.REPAIRED
                            stage = GenerationStage.DONE

                elif stage is GenerationStage.FALLBACK:
                    current, fallback_kind = resolve_fallback(generation_input)
                    provenance = Provenance.FALLBACK
                    logfire.info(
                        "Fallback payload selected",
                        request_id=record.request_id,
                        fallback_kind=fallback_kind
                    )
                    stage = GenerationStage.DONE

                record.add_timing(stage_name, time.perf_counter() - stage_start)

            record.provenance = provenance

            logfire.info(
                "Generation completed",
                request_id=record.request_id,
                provenance=provenance.value,
                model_calls=record.model_calls,
                applied_repairs=record.applied_repairs,
                stage_reasons=record.stage_reasons,
                total_duration=record.total_duration(),
                stage_timings=record.stage_timings
            )

        return GenerationResult(output=current, provenance=provenance, record=record)
