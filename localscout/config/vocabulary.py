"""Static vocabulary tables for query understanding.

Every keyword-driven decision in the engine (cuisine detection, attribute
keywords, facet gating, preference learning, category browsing) reads one
of the tables below through a single generic matcher instead of carrying
its own chain of substring checks.  Adding a cuisine or an attribute is a
data change here, not a code change elsewhere.

All tables are plain module-level constants built once at import time.
"""

from __future__ import annotations

import re
from functools import lru_cache


# ═════════════════════════════════════════════════════════════════════════
# 1. CUISINE MAP
# ═════════════════════════════════════════════════════════════════════════
# Canonical cuisine -> surface forms a user may type.  The canonical key is
# what the relevance scorer looks for in category strings.

CUISINE_SYNONYMS: dict[str, tuple[str, ...]] = {
    "greek": ("greek", "gyro", "gyros", "souvlaki", "moussaka", "tzatziki"),
    "italian": ("italian", "pizza", "pasta", "risotto", "carbonara", "lasagna", "focaccia"),
    "chinese": ("chinese", "dim sum", "noodles", "wonton", "chow mein"),
    "japanese": ("japanese", "sushi", "ramen", "sashimi", "tempura", "teriyaki"),
    "thai": ("thai", "pad thai", "curry", "tom yum"),
    "indian": ("indian", "curry", "tandoori", "biryani", "naan"),
    "mexican": ("mexican", "tacos", "burritos", "enchiladas", "quesadilla"),
    "french": ("french", "croissant", "baguette", "escargot", "ratatouille"),
    "american": (
        "american", "burger", "burgers", "steak", "bbq", "barbecue",
        "ribs", "brisket", "pulled pork", "smoked",
    ),
    "mediterranean": ("mediterranean", "mezze", "falafel", "hummus", "kebab"),
    "vietnamese": ("vietnamese", "pho", "banh mi", "spring roll"),
    "korean": ("korean", "bibimbap", "kimchi", "bulgogi"),
    "spanish": ("spanish", "tapas", "paella", "sangria"),
    "turkish": ("turkish", "doner", "kebab", "baklava"),
    "seafood": ("seafood", "fish", "oyster", "lobster", "crab", "shrimp"),
    "bakery": ("bakery", "bakeries", "bread", "pastry", "pastries", "bake"),
    "cafe": ("cafe", "café", "coffee", "espresso", "cappuccino", "latte"),
}


# ═════════════════════════════════════════════════════════════════════════
# 2. ATTRIBUTE KEYWORDS
# ═════════════════════════════════════════════════════════════════════════
# Attribute keyword -> class.  Classes in KNOWLEDGE_PRIORITY_CLASSES are
# almost never present in structured category fields, so the scorer weighs
# a free-text knowledge hit for them far above a generic one.

ATTRIBUTE_KEYWORDS: dict[str, str] = {
    "vegan": "dietary",
    "vegetarian": "dietary",
    "gluten free": "dietary",
    "gluten-free": "dietary",
    "halal": "dietary",
    "kosher": "dietary",
    "organic": "dietary",
    "healthy": "dietary",
    "plant based": "dietary",
    "plant-based": "dietary",
    "dog friendly": "pet",
    "dog-friendly": "pet",
    "pet friendly": "pet",
    "pet-friendly": "pet",
    "outdoor seating": "outdoor",
    "outdoor": "outdoor",
    "patio": "outdoor",
    "terrace": "outdoor",
    "romantic": "ambience",
    "date night": "ambience",
    "cozy": "ambience",
    "quiet": "ambience",
    "family friendly": "family",
    "family-friendly": "family",
    "kids menu": "family",
    "kids meal": "family",
    "kids meals": "family",
    "kids food": "family",
    "children menu": "family",
    "children meal": "family",
    "children meals": "family",
    "childrens menu": "family",
    "brunch": "time_of_day",
    "breakfast": "time_of_day",
    "lunch": "time_of_day",
    "dinner": "time_of_day",
    "late night": "time_of_day",
}

KNOWLEDGE_PRIORITY_CLASSES: frozenset[str] = frozenset({"family", "dietary", "outdoor", "pet"})


# ═════════════════════════════════════════════════════════════════════════
# 3. FACETS
# ═════════════════════════════════════════════════════════════════════════
# Explicit alcohol words only.  "drink"/"drinks" is deliberately absent:
# "drinks for kids" must not gate out every cafe in town.

ALCOHOL_KEYWORDS: tuple[str, ...] = (
    "alcohol", "alcoholic", "beer", "beers", "ale", "ales", "lager", "ipa",
    "stout", "cider", "wine", "wines", "prosecco", "champagne", "cocktail",
    "cocktails", "gin", "rum", "vodka", "whisky", "whiskey", "bourbon",
    "tequila", "mezcal", "sangria", "spirits", "liquor", "booze", "pint",
    "pints", "mojito", "mojitos", "margarita", "margaritas", "negroni",
    "aperol", "spritz", "cachaca", "cachaça", "sake",
)

# Category words whose businesses can plausibly serve alcohol.
FACET_CAPABLE_CATEGORIES: dict[str, tuple[str, ...]] = {
    "alcohol": (
        "bar", "pub", "tavern", "inn", "brewery", "brewpub", "taproom",
        "lounge", "nightclub", "club", "wine", "cocktail", "restaurant",
        "bistro", "brasserie", "gastropub", "grill", "steakhouse", "izakaya",
        "tapas", "trattoria", "pizzeria", "cantina", "distillery",
    ),
}

FACET_KEYWORDS: dict[str, tuple[str, ...]] = {
    "alcohol": ALCOHOL_KEYWORDS,
}


# ═════════════════════════════════════════════════════════════════════════
# 4. CONVERSATION PREFERENCES
# ═════════════════════════════════════════════════════════════════════════
# Surface words -> stored dietary label.

DIETARY_PREFERENCES: dict[str, str] = {
    "veggie": "vegetarian",
    "vegetarian": "vegetarian",
    "vegan": "vegan",
    "gluten": "gluten-free",
    "coeliac": "gluten-free",
    "celiac": "gluten-free",
    "halal": "halal",
    "kosher": "kosher",
    "dairy free": "dairy-free",
    "dairy-free": "dairy-free",
}

BUDGET_PREFERENCES: dict[str, str] = {
    "cheap": "budget",
    "budget": "budget",
    "affordable": "budget",
    "inexpensive": "budget",
    "premium": "premium",
    "fancy": "premium",
    "upscale": "premium",
    "fine dining": "premium",
}

FAVORITE_CATEGORY_WORDS: tuple[str, ...] = (
    "burger", "pizza", "sushi", "indian", "italian", "chinese", "thai",
    "mexican", "seafood", "steak", "greek", "ramen", "tapas", "bbq",
)


# ═════════════════════════════════════════════════════════════════════════
# 5. DISCOVERY QUALIFIERS AND SEARCH SYNONYMS
# ═════════════════════════════════════════════════════════════════════════
# Generic place nouns and price words.  Their presence turns an offer/event
# question into a discovery question, so the hard-stop gate stays closed.

PLACE_NOUNS: tuple[str, ...] = (
    "restaurant", "restaurants", "cafe", "cafes", "café", "bar", "bars",
    "pub", "pubs", "bakery", "takeaway", "diner", "bistro", "food", "brunch",
    "breakfast", "lunch", "dinner", "shop", "shops", "salon", "gym",
)

PRICE_WORDS: tuple[str, ...] = (
    "cheap", "cheapest", "budget", "affordable", "expensive", "price",
    "prices", "pricey", "under", "£", "$", "€", "fancy", "premium",
)

# Expand a bare category request into the words directory categories use.
SEARCH_SYNONYMS: dict[str, tuple[str, ...]] = {
    "food": ("restaurant", "food", "dining", "eatery", "grill", "kitchen", "bistro", "diner"),
    "restaurants": ("restaurant", "dining", "eatery", "grill", "kitchen", "bistro", "diner"),
    "bars": ("bar", "pub", "tavern", "lounge", "cocktail", "nightlife"),
    "pubs": ("pub", "bar", "tavern", "inn"),
    "coffee": ("coffee", "cafe", "café", "espresso", "tea"),
    "cafes": ("cafe", "café", "coffee", "bakery", "tea"),
    "drinks": ("bar", "pub", "cocktail", "wine", "brewery"),
    "cocktails": ("cocktail", "bar", "lounge", "mixology"),
    "nightlife": ("bar", "pub", "nightclub", "club", "lounge", "cocktail"),
    "things to do": ("entertainment", "activity", "attraction", "museum", "theatre", "cinema"),
}


# ═════════════════════════════════════════════════════════════════════════
# Generic matcher
# ═════════════════════════════════════════════════════════════════════════

@lru_cache(maxsize=2048)
def _term_pattern(term: str) -> re.Pattern[str]:
    if not any(ch.isalnum() for ch in term):
        # Currency symbols and the like match anywhere ("£10").
        return re.compile(re.escape(term))
    # Word-boundary match that tolerates a trailing plural "s".
    return re.compile(rf"(?<![a-z0-9]){re.escape(term.lower())}s?(?![a-z0-9])")


def contains_term(text: str, term: str) -> bool:
    """Return ``True`` if *term* occurs in *text* as a whole word or phrase."""
    if not text or not term:
        return False
    return _term_pattern(term).search(text.lower()) is not None


def find_terms(text: str, terms: tuple[str, ...] | list[str]) -> list[str]:
    """Return the *terms* that occur in *text*, in table order."""
    return [term for term in terms if contains_term(text, term)]
