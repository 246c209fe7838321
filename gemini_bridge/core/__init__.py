"""Core protocol package.

Architectural role:
    Holds the request-routing layer that sits between the stdio transport and
    the tool dispatcher / capability registry.

Composition:
    - `protocol_types`: JSON-RPC request/response data contracts and codes.
    - `errors`: exception hierarchy shared by every layer.
    - `router`: method table, session state, and the failure-containment
      backstop that turns any handler exception into one response.

Determinism and side effects:
    Package import is side-effect free.
"""
