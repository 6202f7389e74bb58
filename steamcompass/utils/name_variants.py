# ===== IMPORTS & DEPENDENCIES =====
import re
import logging
from typing import List

from steamcompass.config import MIN_CANDIDATE_LENGTH

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

TRADEMARK_GLYPHS = re.compile(r'[™®©]')

# ===== UTILITY FUNCTIONS =====

def strip_trademarks(name: str) -> str:
    """Removes trademark/copyright glyphs and collapses whitespace."""
    if not name:
        return ""
    cleaned = TRADEMARK_GLYPHS.sub('', name)
    return re.sub(r'\s+', ' ', cleaned).strip()


def name_candidates(display_name: str) -> List[str]:
    """
    Builds the ordered list of search names for name-keyed sources,
    most specific first:
      1. the name without trademark glyphs
      2. the name truncated at the first ':' (subtitle dropped)
      3. the name without parenthesized segments
      4. the name without digits (edition numbers, years)
      5. the name without whitespace, lowercased
    Duplicates and candidates shorter than MIN_CANDIDATE_LENGTH are dropped.
    """
    base = strip_trademarks(display_name)
    if not base:
        return []

    variants = [
        base,
        base.split(':', 1)[0],
        re.sub(r'\s*\([^)]*\)', '', base),
        re.sub(r'\d+', '', base),
        re.sub(r'\s+', '', base).lower(),
    ]

    candidates: List[str] = []
    for variant in variants:
        variant = re.sub(r'\s+', ' ', variant).strip()
        if len(variant) < MIN_CANDIDATE_LENGTH:
            logger.debug(f"[name_candidates] Skipping ambiguous candidate '{variant}' for '{display_name}'")
            continue
        if variant not in candidates:
            candidates.append(variant)

    logger.debug(f"[name_candidates] Candidates for '{display_name}': {candidates}")
    return candidates
