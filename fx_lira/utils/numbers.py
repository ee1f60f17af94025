"""Turkish number formatting helpers used by the calculator output."""

from __future__ import annotations

import math

_ONES = ("", "Bir", "İki", "Üç", "Dört", "Beş", "Altı", "Yedi", "Sekiz", "Dokuz")
_TENS = ("", "On", "Yirmi", "Otuz", "Kırk", "Elli", "Altmış", "Yetmiş", "Seksen", "Doksan")
_SCALES = ("", "Bin", "Milyon", "Milyar", "Trilyon")


def parse_formatted_currency(value: str | None) -> float:
    """Parse ``"1.234,56"`` style input; anything unparsable becomes ``0``."""

    if not value:
        return 0.0
    normalised = value.replace(".", "").replace(",", ".", 1)
    try:
        parsed = float(normalised)
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(parsed) else parsed


def format_currency(value: str | float | int | None) -> str:
    """Format with ``.`` thousands and ``,`` decimals, always two decimals.

    Strings are read as already Turkish-formatted input.
    """

    if value is None or value == "":
        return ""
    if isinstance(value, str):
        normalised = value.replace(".", "").replace(",", ".", 1)
        try:
            number = float(normalised)
        except ValueError:
            return ""
    else:
        number = float(value)
    if not math.isfinite(number):
        return ""
    return f"{number:,.2f}".translate(str.maketrans({",": ".", ".": ","}))


def _group_words(number: int) -> str:
    words: list[str] = []
    if number >= 100:
        hundreds = number // 100
        if hundreds > 1:
            words.append(_ONES[hundreds])
        words.append("Yüz")
        number %= 100
    if number >= 10:
        words.append(_TENS[number // 10])
        number %= 10
    if number > 0:
        words.append(_ONES[number])
    return " ".join(words)


def number_to_turkish(amount: float) -> str:
    """Spell a TRY amount out in words, e.g. ``1001.5`` -> ``"Bin Bir TL Elli Kuruş"``.

    Exactly one thousand reads "Bin" rather than "Bir Bin". A zero lira part
    reads "Sıfır TL" regardless of kuruş.
    """

    if not math.isfinite(amount):
        raise ValueError(f"amount must be finite, got {amount!r}")
    integer_text, decimal_text = f"{amount:.2f}".split(".")
    number = abs(int(integer_text))
    if number == 0:
        return "Sıfır TL"

    parts: list[str] = []
    scale = 0
    while number > 0:
        group = number % 1000
        if group > 0:
            group_text = "" if scale == 1 and group == 1 else _group_words(group)
            suffix = _SCALES[scale] if scale < len(_SCALES) else ""
            parts.insert(0, " ".join(piece for piece in (group_text, suffix) if piece))
        number //= 1000
        scale += 1

    result = " ".join(parts) + " TL"
    kurus = int(decimal_text)
    if kurus > 0:
        result += f" {_group_words(kurus)} Kuruş"
    return result


__all__ = ["format_currency", "parse_formatted_currency", "number_to_turkish"]
