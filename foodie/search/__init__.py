"""
Place search adapter.

Responsibilities:
- Split compound queries into independent keyword searches.
- Query the Serper places endpoint in parallel.
- Normalise raw provider records into PlaceCandidate objects.
- Deduplicate across sub-searches by stable identity.
"""
