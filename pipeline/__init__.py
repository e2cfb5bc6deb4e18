"""
Pipeline factory function.

This module provides create_generation_pipeline() which wires the
model-call collaborator into the generation state machine.
"""


def create_generation_pipeline(generator=None):
    """
    Factory function to create a fully configured generation runner.

    Args:
        generator: Optional async callable (prompt -> OutputContract).
            Defaults to a RequestComposer backed by the configured model.

    Returns:
        GenerationRunner ready to execute

    Example:
        ```python
        from pipeline import create_generation_pipeline
        from pipeline.steps.request_composer import sanitize_input

        runner = create_generation_pipeline()
        generation_input = sanitize_input(booking, context)

        result = await runner.run(generation_input)
        print(result.provenance, result.output.subject)
        ```
    """
    # Import lazily to avoid circular dependencies at package import time
    from config.settings import settings
    from pipeline.core.runner import GenerationRunner
    from pipeline.steps.request_composer.main import RequestComposer

    return GenerationRunner(
        generator=generator or RequestComposer(),
        timeout=settings.generation_timeout_seconds,
        correction_pass_enabled=settings.correction_pass_enabled,
    )
