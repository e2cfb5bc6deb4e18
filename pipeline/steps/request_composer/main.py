"""
Request Composer - model-call collaborator

Sends one prompt to the language model and parses the answer into an
OutputContract. Exactly one model call per generate(): the agent is built
with retries=0 and contract rules are left to the validator so the runner
stays in control of the retry budget.
"""

from typing import Optional

import logfire
from pydantic_ai import Agent

from config.settings import settings
from pipeline.models.core import OutputContract
from utils.llm_agent import create_agent

from .prompts import SYSTEM_PROMPT
from .utils import describe_output, parse_model_output


class RequestComposer:
    """
    Thin wrapper around a pydantic-ai agent returning raw JSON text.

    The agent is created on first use because pydantic-ai resolves the
    provider (and its API key) at construction time.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.model = model or settings.generation_model
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.generation_max_tokens
        self._agent: Optional[Agent] = None

    @property
    def agent(self) -> Agent:
        if self._agent is None:
            self._agent = create_agent(
                model=self.model,
                output_type=str,
                system_prompt=SYSTEM_PROMPT,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                retries=0,
            )
        return self._agent

    async def generate(self, prompt: str) -> OutputContract:
        """
        Run a single model call and parse its JSON answer.

        Raises:
            MalformedModelOutput: If the answer is not the expected JSON object
            Exception: Provider errors propagate to the runner untouched
        """
        logfire.info(
            "Calling generation model",
            model=self.model,
            temperature=self.temperature,
            prompt_chars=len(prompt)
        )

        result = await self.agent.run(prompt)
        output = parse_model_output(result.output)

        logfire.info("Model output parsed", **describe_output(output))
        return output

    async def __call__(self, prompt: str) -> OutputContract:
        return await self.generate(prompt)
