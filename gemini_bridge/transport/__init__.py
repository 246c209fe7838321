"""Stdio transport package.

Module split:
    - `framing`: inbound line splitting and JSON decoding.
    - `encoder`: outbound one-line-per-response encoding and writing.

Both modules operate on binary streams so that oversized lines (large inline
base64 images) never hit text-layer buffering limits.
"""
