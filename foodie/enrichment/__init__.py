"""
Review enrichment.

Responsibilities:
- Pick the top-rated candidates worth a closer look.
- Fetch public review snippets (Serper) or page text (Jina reader).
- Bound every fetch by a timeout and every text by a character budget.
"""
