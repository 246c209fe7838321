"""gemini-bridge: JSON-RPC stdio adapter for the Gemini API.

Architectural role:
    Package root for the stdio bridge. Subpackages split the process into the
    transport edge (`transport`, `api`), protocol routing (`core`), static
    capability data (`catalog`), tool execution (`tools`, `memory`, `safety`),
    and provider access (`llm`).
"""

__version__ = "0.5.1"

SERVER_NAME = "gemini-bridge"
