"""Business-name matching helpers built on rapidfuzz.

Assistant replies and user messages refer to businesses loosely ("Adam's"
for "Adams Cocktail Bar", curly vs straight apostrophes, bold markdown).
These helpers map such mentions back onto the known candidate names of the
current turn so conversation state only ever records real directory names.
"""

import re
import unicodedata

from rapidfuzz import fuzz, process

_BOLD_RE = re.compile(r"\*\*([^*\n]{2,80})\*\*")
_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "`": "'"})


def normalize_name(name: str) -> str:
    """Lowercase, fold accents and apostrophes, collapse whitespace."""
    folded = unicodedata.normalize("NFKD", name.translate(_APOSTROPHES))
    folded = folded.encode("ascii", "ignore").decode("ascii").lower()
    folded = re.sub(r"[^a-z0-9&' ]+", " ", folded)
    return re.sub(r"\s+", " ", folded).strip()


def fuzzy_match(
    query: str,
    candidates: list[str],
    threshold: float = 0.85,
) -> tuple[str, float] | None:
    """Find the best fuzzy match for *query* among *candidates*.

    Uses ``token_sort_ratio`` on normalised names so word order and
    punctuation differences do not matter.  Returns ``(candidate, score)``
    with the score in 0.0-1.0, or ``None`` below *threshold*.
    """
    if not candidates or not query.strip():
        return None

    normalized = {normalize_name(c): c for c in candidates}
    result = process.extractOne(
        normalize_name(query),
        list(normalized),
        scorer=fuzz.token_sort_ratio,
        score_cutoff=threshold * 100,
    )
    if result is None:
        return None

    match_str, score, _ = result
    return (normalized[match_str], score / 100.0)


def extract_business_names(text: str, known_names: list[str]) -> list[str]:
    """Return the known business names mentioned in *text*, in order of appearance.

    A name counts as mentioned when its normalised form occurs in the
    normalised text, or when a ``**bold**`` span fuzzily matches it.
    Results are de-duplicated.
    """
    if not text or not known_names:
        return []

    haystack = normalize_name(text)
    found: list[tuple[int, str]] = []
    seen: set[str] = set()

    for name in known_names:
        needle = normalize_name(name)
        if not needle or name in seen:
            continue
        position = haystack.find(needle)
        if position >= 0:
            found.append((position, name))
            seen.add(name)

    for match in _BOLD_RE.finditer(text):
        best = fuzzy_match(match.group(1), [n for n in known_names if n not in seen])
        if best is not None:
            found.append((haystack.find(normalize_name(match.group(1))), best[0]))
            seen.add(best[0])

    found.sort(key=lambda item: item[0])
    return [name for _, name in found]
