"""Static capability catalog.

Architectural role:
    Pure data queried by the router and dispatcher. Nothing in this package is
    mutated after import / registry construction.

Module split:
    - `models`: Gemini model catalog and capability filters.
    - `registry`: tool, resource and prompt descriptors.
    - `resources`: resource URI -> document content.
    - `prompts`: prompt template rendering for `prompts/get`.
    - `help_content`: markdown help topics shared by `get_help` and resources.
"""
