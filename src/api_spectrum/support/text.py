"""Naming helpers shared by the metadata, tag and message generators."""

import re

import inflect

_inflect = inflect.engine()

_WORD_SPLIT = re.compile(r"[\s_\-.]+")


def singular(word: str) -> str:
    """Singular form of an English noun; unknown or already singular words pass through."""
    if not word:
        return word
    return _inflect.singular_noun(word) or word


def plural(word: str) -> str:
    if not word:
        return word
    return _inflect.plural_noun(word) or word


def studly(value: str) -> str:
    """``order-items`` -> ``OrderItems``."""
    return "".join(w[:1].upper() + w[1:] for w in _WORD_SPLIT.split(value) if w)


def camel(value: str) -> str:
    """``products.index`` -> ``productsIndex``."""
    s = studly(value)
    return s[:1].lower() + s[1:]


def singular_studly(value: str) -> str:
    """``order-items`` -> ``OrderItem``."""
    return studly(singular(value))


def humanize(field: str) -> str:
    """``first_name`` -> ``First Name``, keeping the rest of each word untouched."""
    words = field.replace("_", " ").replace(".", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def class_basename(name: str) -> str:
    r"""Last segment of a qualified class name (``App\Http\Resources\UserResource`` -> ``UserResource``)."""
    return re.split(r"[\\./]", name.strip("\\"))[-1]
