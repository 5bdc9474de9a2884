"""
LLM integration layer.

Responsibilities:
- Manage Groq (primary) and Gemini (secondary) configuration and credentials.
- Expose a uniform JSON / plain-text completion call per provider.
- Track sticky failover between providers for the running process.
- Run tiered fallback chains that end in a deterministic answer.
"""
