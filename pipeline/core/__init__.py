"""
Core pipeline infrastructure.

This package contains the core components of the pipeline:
- GenerationRunner: the generation state machine (pipeline.core.runner)

Data models are in pipeline.models.core
Custom exceptions are in pipeline.core.exceptions

The runner is not re-exported here: the steps import
pipeline.core.exceptions, and the runner imports the steps.
"""
