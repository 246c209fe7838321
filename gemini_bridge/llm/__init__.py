"""LLM access package.

Architectural role:
    Provides provider configuration, request-payload construction, and the
    transport adapter used by the tool dispatcher to reach the Gemini API.

Module split:
    - `provider_config`: environment-driven settings and default-model policy.
    - `client`: blocking HTTP transport and response parsing (`requests`).
    - `service`: async provider facade used by `tools.dispatcher`.
"""
