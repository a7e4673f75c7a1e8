"""Shopping-aisle categories for item names."""

from __future__ import annotations

import re

# Checked in order; the first category with a keyword hit wins
_CATEGORY_KEYWORDS: dict[str, list[str]] = {
    "Household": [
        "paper towel", "toilet paper", "tissue", "garbage bag", "trash bag",
        "dish soap", "laundry", "detergent", "cleaner", "bleach", "foil",
        "parchment", "ziplock", "ziploc", "sponge", "wipes",
    ],
    "Beverages": [
        "coffee", "tea", "juice", "soda", "pop", "sparkling water", "water",
        "energy drink",
    ],
    "Dairy & Eggs": [
        "milk", "cream", "half and half", "butter", "cheese", "yogurt",
        "sour cream", "cottage cheese", "cream cheese", "eggs", "parmesan",
        "mozzarella", "cheddar",
    ],
    "Meat & Seafood": [
        "beef", "steak", "ground beef", "pork", "bacon", "ham", "sausage",
        "chicken", "turkey", "roast", "ribs", "salmon", "tuna", "shrimp", "fish",
    ],
    "Produce": [
        "lettuce", "spinach", "kale", "cucumber", "tomato", "onion", "garlic",
        "carrot", "celery", "pepper", "zucchini", "mushroom", "broccoli",
        "cauliflower", "potato", "sweet potato", "avocado", "lemon", "lime",
        "apple", "banana", "orange", "berries", "strawberr", "blueberr",
        "grapes", "cilantro", "parsley", "basil", "ginger",
    ],
    "Bakery": ["bread", "bun", "buns", "tortilla", "wrap", "bagel", "pita"],
    "Frozen": [
        "frozen", "ice cream", "fries", "pizza", "nuggets", "perogies",
        "pierogies",
    ],
    "Snacks": ["chips", "cracker", "cookies", "chocolate", "granola", "snack"],
    "Spices & Baking": [
        "flour", "baking soda", "baking powder", "yeast", "vanilla",
        "cinnamon", "paprika", "oregano", "thyme", "spice", "salt", "pepper",
        "cocoa",
    ],
    "Pantry": [
        "rice", "pasta", "noodles", "sauce", "ketchup", "mustard", "mayo",
        "mayonnaise", "vinegar", "oil", "olive oil", "can", "canned", "beans",
        "broth", "stock", "soup", "tomato paste", "salsa", "soy sauce",
        "hot sauce", "sugar",
    ],
}

OTHER = "Other"
CATEGORIES: tuple[str, ...] = (*_CATEGORY_KEYWORDS, OTHER)

# Keywords match at the start of a word ("tea" must not hit "steak")
_CATEGORY_PATTERNS: dict[str, re.Pattern[str]] = {
    category: re.compile(
        r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")"
    )
    for category, keywords in _CATEGORY_KEYWORDS.items()
}


def categorize_item_name(name: str) -> str:
    """Guess the shopping aisle for an item name.

    >>> categorize_item_name("2% Milk")
    'Dairy & Eggs'
    >>> categorize_item_name("mystery box")
    'Other'
    """
    text = (name or "").lower().strip() if isinstance(name, str) else ""
    if not text:
        return OTHER
    for category, pattern in _CATEGORY_PATTERNS.items():
        if pattern.search(text):
            return category
    return OTHER
