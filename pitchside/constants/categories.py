"""Article category constants: single source of truth for the backend.

Must stay in sync with:
  frontend: src/pages/Articles.tsx (CATEGORY_VALUES)
"""

VALID_CATEGORIES = (
    'Match Analysis',
    'Transfer News',
    'Player Spotlight',
    'World Cup 2026',
    'Champions League',
    'Premier League',
    'La Liga',
    'Serie A',
    'Bundesliga',
    'MLS',
    'Tactics',
    'Opinion',
)

# Lowercased lookup so 'la liga' and 'LA LIGA' both map to 'La Liga'
_CATEGORY_LOOKUP = {c.lower(): c for c in VALID_CATEGORIES}

# Slugs the old admin form used to send
LEGACY_CATEGORY_MAP = {
    'match-analysis': 'Match Analysis',
    'transfers': 'Transfer News',
    'transfer-news': 'Transfer News',
    'player-spotlight': 'Player Spotlight',
    'world-cup': 'World Cup 2026',
    'ucl': 'Champions League',
    'epl': 'Premier League',
}


def normalize_category(category):
    """Map a category (any case, or a legacy slug) to its canonical name.

    Returns None for empty input; unknown values are returned stripped
    so validate_category can reject them.
    """
    if not category:
        return None
    key = category.strip()
    lowered = key.lower()
    if lowered in LEGACY_CATEGORY_MAP:
        return LEGACY_CATEGORY_MAP[lowered]
    return _CATEGORY_LOOKUP.get(lowered, key)


def validate_category(category) -> bool:
    """Check if a category is valid after normalization."""
    return normalize_category(category) in VALID_CATEGORIES
