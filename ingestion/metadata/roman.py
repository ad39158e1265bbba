import re

MAX_SESSION_NUMBER = 200

_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100, "D": 500, "M": 1000}
_ARABIC_TO_ROMAN = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)
_ROMAN_RE = re.compile(r"^[IVXLCDM]+$")


def roman_to_arabic(roman: str) -> int:
    """Convert a Roman numeral using subtractive notation; 0 when not a numeral."""
    upper = (roman or "").strip().upper()
    if not _ROMAN_RE.match(upper):
        return 0
    result = 0
    previous = 0
    for char in reversed(upper):
        value = _ROMAN_VALUES[char]
        if value < previous:
            result -= value
        else:
            result += value
        previous = value
    return result


def arabic_to_roman(number: int) -> str:
    """Canonical Roman numeral for 1-3999; empty string outside that range."""
    if number <= 0 or number > 3999:
        return ""
    parts = []
    remaining = int(number)
    for value, numeral in _ARABIC_TO_ROMAN:
        count, remaining = divmod(remaining, value)
        parts.append(numeral * count)
    return "".join(parts)


def is_canonical_roman(roman: str) -> bool:
    upper = (roman or "").strip().upper()
    value = roman_to_arabic(upper)
    return value > 0 and arabic_to_roman(value) == upper


def parse_session_number(value: str) -> int | None:
    """Parse an Arabic or Roman session number within 1-200."""
    trimmed = (value or "").strip()
    if trimmed.isdigit():
        number = int(trimmed)
    elif is_canonical_roman(trimmed):
        number = roman_to_arabic(trimmed)
    else:
        return None
    if 1 <= number <= MAX_SESSION_NUMBER:
        return number
    return None


def session_search_variants(session_number: int) -> list[str]:
    """Spellings under which a session is published (``Sesja 23``, ``XXIII Sesja``, ...)."""
    roman = arabic_to_roman(session_number)
    arabic = str(session_number)
    return [
        f"Sesja {arabic}",
        f"Sesja Nr {arabic}",
        f"Sesji {arabic}",
        f"Sesja {roman}",
        f"Sesja Nr {roman}",
        f"Sesji {roman}",
        f"{roman} Sesja",
        f"Nr {roman}",
    ]
