"""
Topical Authority Coach

Architecture:
- workflows/  — Funnel stage definitions and ordering
- backends/   — One transport per LLM provider (google, openai, anthropic)
- gateway.py  — Builds generation requests, validates structured output, degrades on failure
- orchestrator.py — The funnel state machine; the only code that mutates a Session
- state.py    — Session aggregate and the in-memory session store
- export.py   — Markdown serialization of a Session
"""

__version__ = "1.0.0"
