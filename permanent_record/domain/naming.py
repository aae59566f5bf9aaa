"""Name mangling used to derive a model's conventional source name.

``ZooKeeper`` models read their records from a source registered as
``ZOO_KEEPERS``.
"""

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z\d]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

UNCOUNTABLE = frozenset(
    {
        "equipment",
        "information",
        "rice",
        "money",
        "species",
        "series",
        "fish",
        "sheep",
        "deer",
        "news",
        "data",
        "metadata",
        "police",
    }
)

IRREGULAR: dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "goose": "geese",
    "foot": "feet",
    "tooth": "teeth",
    "ox": "oxen",
    "quiz": "quizzes",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "criterion": "criteria",
    "analysis": "analyses",
    "status": "statuses",
    "bus": "buses",
}

# Words ending in -f/-fe that take -ves
_VES = {
    "leaf": "leaves",
    "loaf": "loaves",
    "half": "halves",
    "shelf": "shelves",
    "wolf": "wolves",
    "calf": "calves",
    "knife": "knives",
    "life": "lives",
    "wife": "wives",
}


def underscore(name: str) -> str:
    """Return ``name`` in snake_case (``"HTTPServer"`` -> ``"http_server"``)."""
    snake = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    snake = _WORD_BOUNDARY.sub(r"\1_\2", snake)
    return snake.replace("-", "_").replace(" ", "_").lower()


def _pluralize_word(word: str) -> str:
    lower = word.lower()
    if lower in UNCOUNTABLE or lower in IRREGULAR.values():
        return word
    if lower in IRREGULAR:
        return _match_case(word, IRREGULAR[lower])
    if lower in _VES:
        return _match_case(word, _VES[lower])
    if re.search(r"[^aeiou]y$", lower):
        return word[:-1] + "ies"
    if re.search(r"(ss|x|z|ch|sh)$", lower):
        return word + "es"
    if lower.endswith("s"):
        return word
    return word + "s"


def _match_case(original: str, replacement: str) -> str:
    if original.isupper():
        return replacement.upper()
    if original[:1].isupper():
        return replacement.capitalize()
    return replacement


def pluralize(phrase: str) -> str:
    """Pluralise the last ``_``-separated word of ``phrase``."""
    if not phrase:
        return phrase
    head, sep, last = phrase.rpartition("_")
    return f"{head}{sep}{_pluralize_word(last)}"


def constant_name_for(model_name: str) -> str:
    """Return the conventional source name for ``model_name``.

    >>> constant_name_for("ZooKeeper")
    'ZOO_KEEPERS'
    """
    # Nested classes report "Outer.Inner"; only the class name counts
    simple = model_name.rsplit(".", 1)[-1]
    return pluralize(underscore(simple)).upper()
