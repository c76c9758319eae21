"""
Recipe catalog and matching engine.

Responsibilities:
- Load and validate the static recipe catalog.
- Evaluate filter options against the catalog (structural predicates,
  fuzzy free-text relevance, sorting).
- Extract the selectable filter values present in the catalog.
- Derive display favorite counts.
"""
