"""Memory subsystem package.

Architectural role:
    Holds the in-process conversation transcripts used to give `generate_text`
    calls historical context:
    - `conversation_store`: identifier-keyed turn lists with per-identifier
      locking.

Nothing here is persisted; transcripts live until the process exits.
"""
