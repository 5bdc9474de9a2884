"""
Recommendation pipeline.

Responsibilities:
- Accept a mood/craving plus a location.
- Chain intent refinement, place search, filtering, enrichment and AI judgment.
- Reconcile AI annotations with authoritative place records.
- Return structured recommendations ready for API serialisation.
"""
