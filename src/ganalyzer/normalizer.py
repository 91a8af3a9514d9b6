"""Contributor name normalization.

Raw author names coming out of git history are free text: the same person
shows up as "Martin Pražák", "martin.prazak" and "Martin_Prazak". The
normalizer folds all of them into one canonical key ("martinprazak") so the
aggregator can group them. The key is only ever used for grouping; the name
shown to the user is always one of the raw strings.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

# Accented letter -> closest unaccented ASCII letter. Extend as needed.
DIACRITIC_MAP: Mapping[str, str] = MappingProxyType({
    "á": "a", "à": "a", "â": "a", "ä": "a", "ā": "a", "ã": "a", "å": "a",
    "é": "e", "è": "e", "ê": "e", "ë": "e", "ē": "e", "ę": "e", "ě": "e",
    "í": "i", "ì": "i", "î": "i", "ï": "i", "ī": "i",
    "ó": "o", "ò": "o", "ô": "o", "ö": "o", "ō": "o", "õ": "o",
    "ú": "u", "ù": "u", "û": "u", "ü": "u", "ū": "u", "ů": "u",
    "ý": "y", "ÿ": "y",
    "ñ": "n",
    "ç": "c", "č": "c",
    "š": "s", "ž": "z", "ř": "r", "ď": "d", "ť": "t", "ň": "n",
    "Á": "A", "À": "A", "Â": "A", "Ä": "A", "Ā": "A", "Ã": "A", "Å": "A",
    "É": "E", "È": "E", "Ê": "E", "Ë": "E", "Ē": "E", "Ę": "E", "Ě": "E",
    "Í": "I", "Ì": "I", "Î": "I", "Ï": "I", "Ī": "I",
    "Ó": "O", "Ò": "O", "Ô": "O", "Ö": "O", "Ō": "O", "Õ": "O",
    "Ú": "U", "Ù": "U", "Û": "U", "Ü": "U", "Ū": "U", "Ů": "U",
    "Ý": "Y", "Ÿ": "Y",
    "Ñ": "N",
    "Ç": "C", "Č": "C",
    "Š": "S", "Ž": "Z", "Ř": "R", "Ď": "D", "Ť": "T", "Ň": "N",
})

# Anything that is not a Unicode letter or number, whitespace included.
_NON_ALNUM = re.compile(r"[\W_]+")


class NameNormalizer:
    """Maps raw display names to canonical identity keys."""

    def __init__(self, diacritics: Mapping[str, str] = DIACRITIC_MAP):
        self._table = str.maketrans(dict(diacritics))

    def normalize(self, name: str) -> str:
        """Return the canonical key for ``name``.

        Diacritics are replaced first, then the string is lowercased and
        every non-alphanumeric character (including all whitespace) is
        removed, so multi-word and single-token spellings collide.
        """
        if not name:
            return ""
        normalized = name.translate(self._table)
        normalized = normalized.lower()
        return _NON_ALNUM.sub("", normalized)


_DEFAULT = NameNormalizer()


def normalize_name(name: str) -> str:
    """Normalize ``name`` with the default diacritic table."""
    return _DEFAULT.normalize(name)
