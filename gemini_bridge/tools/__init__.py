"""Tool execution package.

Module split:
    - `arguments`: pydantic argument models and error formatting.
    - `media`: image input preparation for `analyze_image`.
    - `results`: in-band result / tool-error payload shapes.
    - `dispatcher`: name -> handler table, provider calls, conversation use.
"""
