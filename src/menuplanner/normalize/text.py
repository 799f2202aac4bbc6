"""Cleaning and segmentation of free-text ingredient lines."""

import re
import unicodedata
from dataclasses import dataclass
from fractions import Fraction

from menuplanner.models import BaseUnit
from menuplanner.normalize.units import is_unit

# Characters that scraped pages regularly deliver as UTF-8 read with a Western codec
_MOJIBAKE_SOURCE_CHARS = "åäöÅÄÖéèêüÜàáíóñ½¼¾–—‘’“”°\u00a0"


def _mojibake_table() -> dict[str, str]:
    table: dict[str, str] = {}
    for char in _MOJIBAKE_SOURCE_CHARS:
        raw = char.encode("utf-8")
        for codec in ("cp1252", "latin-1"):
            try:
                table[raw.decode(codec)] = char
            except UnicodeDecodeError:
                continue
    return table


MOJIBAKE_REPLACEMENTS: dict[str, str] = _mojibake_table()

UNICODE_FRACTIONS: dict[str, Fraction] = {
    "½": Fraction(1, 2),
    "¼": Fraction(1, 4),
    "¾": Fraction(3, 4),
    "⅓": Fraction(1, 3),
    "⅔": Fraction(2, 3),
    "⅛": Fraction(1, 8),
    "⅕": Fraction(1, 5),
}
_VULGAR = "".join(UNICODE_FRACTIONS)

# Preparation descriptors, serving notes, packaging and size words (folded spelling).
# Multi-word phrases are removed before single words.
NOISE_PHRASES: tuple[str, ...] = (
    "att steka i",
    "att fritera i",
    "till servering",
    "till garnering",
    "efter smak",
    "i bitar",
    "i tarningar",
)

NOISE_WORDS: frozenset[str] = frozenset(
    {
        # preparation
        "finhackad",
        "finhackade",
        "hackad",
        "hackade",
        "grovhackad",
        "grovhackade",
        "skivad",
        "skivade",
        "strimlad",
        "strimlade",
        "tarnad",
        "tarnade",
        "riven",
        "rivet",
        "rivna",
        "finriven",
        "finrivet",
        "pressad",
        "pressade",
        "plockad",
        "plockade",
        "nymalen",
        "kokt",
        "kokta",
        "tinad",
        "tinade",
        "fryst",
        "frysta",
        "farsk",
        "farska",
        "ekologisk",
        "ekologiska",
        "eko",
        # serving notes
        "valfritt",
        "ortris",
        "garna",
        "lite",
        "ca",
        # parts
        "kvist",
        "kvistar",
        "klyfta",
        "klyftor",
        "skal",
        "saft",
        "och",
        # packaging
        "forp",
        "forpackning",
        "port",
        "portion",
        "paket",
        "burk",
        "pase",
        # size
        "stor",
        "stora",
        "liten",
        "lilla",
        "sma",
        "medelstor",
        "medelstora",
    }
)

_ABOUT_RE = re.compile(
    r"^\s*(?:ca\.?|cirka|ungefar|ungefär|about|approx\.?|approximately)\s+",
    re.IGNORECASE,
)
_DASH_RE = re.compile(r"[‐‑‒–—―−]")
_LEADING_DASH_RE = re.compile(r"^\s*-\s*")
_AMOUNT = (
    rf"(?:\d+(?:[.,]\d+)?\s*-\s*\d+(?:[.,]\d+)?"
    rf"|\d+\s+\d+/\d+"
    rf"|\d+\s*[{_VULGAR}]"
    rf"|\d+/\d+"
    rf"|[{_VULGAR}]"
    rf"|\d+(?:[.,]\d+)?)"
)
_TRAILING_AMOUNT_RE = re.compile(rf"(?<![\d.,/])(?:\s*-\s*|\s+)({_AMOUNT})\s*([^\W\d]+\.?)\s*$")
_STARTS_WITH_AMOUNT_RE = re.compile(rf"^{_AMOUNT}")
_AMOUNT_DASH_NAME_RE = re.compile(r"^(\d+(?:[.,]\d+)?)\s*-\s*(?=[^\d\s])")
_LEADING_AMOUNT_RE = re.compile(rf"^({_AMOUNT})\s*(.*)$", re.DOTALL)
_UNIT_TOKEN_RE = re.compile(r"^([^\W\d]+\.?)(?=\s|$)\s*(.*)$", re.DOTALL)
_PARENTHETICAL_RE = re.compile(r"\([^)]*\)")
_PUNCTUATION_RE = re.compile(r"[^\w\s]|_")
_NOISE_PHRASE_RES = tuple(re.compile(rf"\b{re.escape(p)}\b") for p in NOISE_PHRASES)


@dataclass(frozen=True)
class ParsedLine:
    """A cleaned ingredient line split into amount, unit and name."""

    amount: Fraction
    unit: str
    name: str
    has_amount: bool = True


# =============================================================================
# Line cleaning
# =============================================================================


def repair_mojibake(value: str) -> str:
    """Replace known mis-encoded byte sequences with the intended characters."""
    for broken in sorted(MOJIBAKE_REPLACEMENTS, key=len, reverse=True):
        if broken in value:
            value = value.replace(broken, MOJIBAKE_REPLACEMENTS[broken])
    return value.replace("\u00a0", " ")


def _move_trailing_amount(line: str) -> str:
    match = _TRAILING_AMOUNT_RE.search(line)
    if not match or not is_unit(match.group(2)):
        return line
    name = line[: match.start()].strip()
    # A line that already leads with an amount keeps its own
    if not name or _STARTS_WITH_AMOUNT_RE.match(name):
        return line
    return f"{match.group(1)} {match.group(2)} {name}"


def clean_ingredient_line(raw: str | None) -> str:
    """
    Clean a raw ingredient line scraped from a recipe page.

    Handles formats like:
    - "ca 2 dl grädde"          -> "2 dl grädde"
    - "- 1 msk olivolja"        -> "1 msk olivolja"
    - "Citron – 2 st"           -> "2 st Citron"
    - "Tomat 2-3 st"            -> "2-3 st Tomat"
    - "3 - gula lökar"          -> "3 gula lökar"

    Returns an empty string for empty or whitespace-only input.
    """
    if not raw or not raw.strip():
        return ""

    line = repair_mojibake(raw).strip()
    line = _ABOUT_RE.sub("", line)
    line = _DASH_RE.sub("-", line)
    line = _LEADING_DASH_RE.sub("", line)
    line = _move_trailing_amount(line)
    line = _AMOUNT_DASH_NAME_RE.sub(r"\1 ", line)
    return " ".join(line.split())


# =============================================================================
# Name tokens
# =============================================================================


def fold_text(value: str) -> str:
    """Lowercase and strip diacritics (``Vitlök`` -> ``vitlok``)."""
    decomposed = unicodedata.normalize("NFKD", value.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_name(raw_name: str) -> str:
    """
    Normalize an ingredient name to the token string used for catalog lookup.

    - Lowercase and fold diacritics
    - Remove parenthetical notes and punctuation
    - Remove preparation, packaging and size words
    - Drop bare numbers
    """
    if not raw_name:
        return ""

    name = fold_text(raw_name)
    name = _PARENTHETICAL_RE.sub(" ", name)
    name = _PUNCTUATION_RE.sub(" ", name)
    for pattern in _NOISE_PHRASE_RES:
        name = pattern.sub(" ", name)

    tokens = [t for t in name.split() if t not in NOISE_WORDS and not t.isdigit()]
    return " ".join(tokens)


# =============================================================================
# Amount and unit
# =============================================================================


def parse_amount(text: str) -> Fraction | None:
    """
    Parse an amount token into an exact fraction.

    Handles formats like:
    - "2", "1.5", "1,5"
    - "1/2", "½"
    - "1 1/2", "1½" (whole plus fraction)
    - "2-3" (range, returns the midpoint)

    Returns None if the text is not an amount.
    """
    text = text.strip()
    if not text:
        return None

    if "-" in text:
        low_text, _, high_text = text.partition("-")
        low, high = parse_amount(low_text), parse_amount(high_text)
        if low is None or high is None:
            return None
        return (low + high) / 2

    if match := re.fullmatch(r"(\d+)\s+(\d+)/(\d+)", text):
        whole, num, denom = (int(g) for g in match.groups())
        return Fraction(whole) + Fraction(num, denom) if denom else None

    if match := re.fullmatch(rf"(\d*)\s*([{_VULGAR}])", text):
        whole = int(match.group(1)) if match.group(1) else 0
        return whole + UNICODE_FRACTIONS[match.group(2)]

    if match := re.fullmatch(r"(\d+)/(\d+)", text):
        num, denom = int(match.group(1)), int(match.group(2))
        return Fraction(num, denom) if denom else None

    if re.fullmatch(r"\d+(?:[.,]\d+)?", text):
        return Fraction(text.replace(",", "."))

    return None


def split_amount_unit(line: str) -> ParsedLine:
    """
    Split a cleaned line into amount, unit and name.

    A leading amount may be followed by a unit. When the next token is not a
    known unit it stays part of the name and the unit defaults to piece.
    """
    match = _LEADING_AMOUNT_RE.match(line)
    amount = parse_amount(match.group(1)) if match else None
    if match is None or amount is None:
        return ParsedLine(amount=Fraction(1), unit=BaseUnit.PIECE.value, name=line.strip(), has_amount=False)

    remainder = match.group(2).strip()
    unit_match = _UNIT_TOKEN_RE.match(remainder)
    if unit_match and is_unit(unit_match.group(1)):
        return ParsedLine(
            amount=amount,
            unit=unit_match.group(1).lower().rstrip("."),
            name=unit_match.group(2).strip(),
        )

    return ParsedLine(amount=amount, unit=BaseUnit.PIECE.value, name=remainder)
