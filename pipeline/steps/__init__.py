"""Pipeline steps package.

This package contains the individual stages of request generation:
- contract_validator: Deterministic output contract checks
- request_composer: Prompts, input sanitization and the model call
- repair: Rule-based text repairs for near-miss outputs
- fallback: Pre-validated payloads for the terminal fallback state
- desk_ask: "If you ask at the desk" UI copy
"""
