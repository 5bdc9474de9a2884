"""
AI judge.

Responsibilities:
- Ask a language model for a per-place verdict on enriched candidates.
- Validate replies against one versioned schema before they are used.
- Fall back from the primary model to the secondary, then to heuristics.
- Generate a broadened query when a search comes back empty.
"""
