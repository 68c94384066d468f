"""
English inflection helpers used to derive model and accessor names.

Rules are checked most-recent-first, so later entries in each list override
earlier, more general ones.
"""

import re
from typing import List, Tuple

PLURALS: List[Tuple[str, str]] = [
    (r"$", "s"),
    (r"(?i)s$", "s"),
    (r"(?i)^(ax|test)is$", r"\1es"),
    (r"(?i)(octop|vir)us$", r"\1i"),
    (r"(?i)(octop|vir)i$", r"\1i"),
    (r"(?i)(alias|status)$", r"\1es"),
    (r"(?i)(bu)s$", r"\1ses"),
    (r"(?i)(buffal|tomat)o$", r"\1oes"),
    (r"(?i)([ti])um$", r"\1a"),
    (r"(?i)([ti])a$", r"\1a"),
    (r"(?i)sis$", "ses"),
    (r"(?i)(?:([^f])fe|([lr])f)$", r"\1\2ves"),
    (r"(?i)(hive)$", r"\1s"),
    (r"(?i)([^aeiouy]|qu)y$", r"\1ies"),
    (r"(?i)(x|ch|ss|sh)$", r"\1es"),
    (r"(?i)(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
    (r"(?i)^(m|l)ouse$", r"\1ice"),
    (r"(?i)^(m|l)ice$", r"\1ice"),
    (r"(?i)^(ox)$", r"\1en"),
    (r"(?i)^(oxen)$", r"\1"),
    (r"(?i)(quiz)$", r"\1zes"),
]

SINGULARS: List[Tuple[str, str]] = [
    (r"(?i)s$", ""),
    (r"(?i)(ss)$", r"\1"),
    (r"(?i)(n)ews$", r"\1ews"),
    (r"(?i)([ti])a$", r"\1um"),
    (r"(?i)((a)naly|(b)a|(d)iagno|(p)arenthe|(p)rogno|(s)ynop|(t)he)(sis|ses)$", r"\1sis"),
    (r"(?i)(^analy)(sis|ses)$", r"\1sis"),
    (r"(?i)([^f])ves$", r"\1fe"),
    (r"(?i)(hive)s$", r"\1"),
    (r"(?i)(tive)s$", r"\1"),
    (r"(?i)([lr])ves$", r"\1f"),
    (r"(?i)([^aeiouy]|qu)ies$", r"\1y"),
    (r"(?i)(s)eries$", r"\1eries"),
    (r"(?i)(m)ovies$", r"\1ovie"),
    (r"(?i)(x|ch|ss|sh)es$", r"\1"),
    (r"(?i)^(m|l)ice$", r"\1ouse"),
    (r"(?i)(bus)(es)?$", r"\1"),
    (r"(?i)(o)es$", r"\1"),
    (r"(?i)(shoe)s$", r"\1"),
    (r"(?i)(cris|test)(is|es)$", r"\1is"),
    (r"(?i)^(a)x[ie]s$", r"\1xis"),
    (r"(?i)(octop|vir)(us|i)$", r"\1us"),
    (r"(?i)(alias|status)(es)?$", r"\1"),
    (r"(?i)^(ox)en", r"\1"),
    (r"(?i)(vert|ind)ices$", r"\1ex"),
    (r"(?i)(matr)ices$", r"\1ix"),
    (r"(?i)(quiz)zes$", r"\1"),
    (r"(?i)(database)s$", r"\1"),
]

IRREGULARS: List[Tuple[str, str]] = [
    ("person", "people"),
    ("man", "men"),
    ("child", "children"),
    ("sex", "sexes"),
    ("move", "moves"),
    ("zombie", "zombies"),
]

UNCOUNTABLES = {
    "equipment", "information", "rice", "money", "species", "series", "fish", "sheep", "jeans", "police",
}


def _apply_rules(word: str, rules: List[Tuple[str, str]]) -> str:
    for pattern, replacement in reversed(rules):
        if re.search(pattern, word):
            return re.sub(pattern, replacement, word, count=1)
    return word


def _split_last_word(word: str) -> Tuple[str, str]:
    match = re.search(r"(.*?)([a-zA-Z]+)$", word)
    if not match:
        return "", word
    return match.group(1), match.group(2)


def pluralize(word: str) -> str:
    """Return the plural form of ``word``.

    >>> pluralize("post")
    'posts'
    >>> pluralize("category")
    'categories'
    """
    if not word:
        return word
    prefix, last = _split_last_word(word)
    if last.lower() in UNCOUNTABLES:
        return word
    for singular, plural in IRREGULARS:
        if last.lower() in (singular, plural):
            return prefix + last[:1] + plural[1:]
    return prefix + _apply_rules(last, PLURALS)


def singularize(word: str) -> str:
    """Return the singular form of ``word``.

    >>> singularize("posts")
    'post'
    >>> singularize("people")
    'person'
    """
    if not word:
        return word
    prefix, last = _split_last_word(word)
    if last.lower() in UNCOUNTABLES:
        return word
    for singular, plural in IRREGULARS:
        if last.lower() in (singular, plural):
            return prefix + last[:1] + singular[1:]
    return prefix + _apply_rules(last, SINGULARS)


def underscore(word: str) -> str:
    """Convert ``CamelCase`` to ``snake_case``; ``"."`` namespace separators become ``"/"``."""
    word = word.replace(".", "/")
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def camelize(word: str) -> str:
    """Convert ``snake_case`` to ``CamelCase``; ``"/"`` separators become ``"."``."""
    return ".".join(
        "".join(part[:1].upper() + part[1:] for part in segment.split("_"))
        for segment in word.split("/")
    )


def classify(name: str) -> str:
    """Return the class name for a (possibly namespaced) plural resource name.

    >>> classify("posts")
    'Post'
    >>> classify("admin/blog_posts")
    'Admin.BlogPost'
    """
    segments = name.split("/")
    segments[-1] = singularize(segments[-1])
    return camelize("/".join(segments))


def humanize(word: str) -> str:
    """Turn an underscored name into a human readable phrase.

    >>> humanize("default_usage")
    'Default usage'
    """
    word = re.sub(r"_id$", "", word).replace("_", " ").strip()
    return word[:1].upper() + word[1:].lower()
