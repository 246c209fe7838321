"""Process edge package.

Architectural role:
- `main`: bootstrap (settings, logging, object wiring, stdout protection).
- `stdio_server`: the read -> route -> write loop over stdin/stdout.

No protocol semantics live here; they belong to `gemini_bridge.core`.
"""
