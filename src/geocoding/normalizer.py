import re

COUNTRY_SUFFIX = ", Sri Lanka"

# Known blood bank labels that Nominatim cannot resolve on their own
LOCATION_ALIASES = {
    "NBC": "Colombo",
    "COLOMBO 01": "Colombo",
    "COLOMBO-01": "Colombo",
}

DIGITS_PATTERN = re.compile(r"\d+")


def normalize_location(raw):
    """
    Turn a raw blood bank label into a "<Place>, Sri Lanka" search string.

    Only the first character is capitalized, so multi-word names come out as
    "Kandy general, Sri Lanka" rather than title case. Labels made only of
    digits collapse to ", Sri Lanka".

    Args:
        raw: Blood bank text as scraped, may be empty or None

    Returns:
        Normalized search string, or "" when there is nothing to normalize
    """
    if not raw:
        return ""

    text = raw.upper().strip()
    normalized = LOCATION_ALIASES.get(text, text)

    # Branch and house numbers
    normalized = DIGITS_PATTERN.sub("", normalized).strip()
    normalized = normalized[:1].upper() + normalized[1:].lower()

    return f"{normalized}{COUNTRY_SUFFIX}"
