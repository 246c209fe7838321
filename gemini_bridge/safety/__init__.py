"""Safety package.

This package holds the rule-based validation of caller-supplied Gemini safety
settings (harm category / block threshold pairs) before they are forwarded to
the provider.
"""
