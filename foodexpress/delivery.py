import re

METRO_PINCODE = re.compile(r"\b(100|110|560|400)\d{3}\b")
METRO_CITY = re.compile(r"\b(mumbai|delhi|bengaluru|bangalore|hyderabad|chennai|pune|kolkata)\b")
COUNTRY = re.compile(r"\bindia\b")


def estimate_delivery_minutes(location: str) -> int:
    """Crude distance heuristic over a free-text pincode/city string.

    Rules are checked in order and the first match wins: metro pincode (20),
    metro city (25), anywhere in India (35), otherwise 30 plus up to 15 minutes
    depending on the length of the text.
    """
    normalized = location.lower()
    if METRO_PINCODE.search(normalized): return 20
    if METRO_CITY.search(normalized): return 25
    if COUNTRY.search(normalized): return 35
    return 30 + min(15, len(normalized))


def eta_text(minutes: int) -> str:
    return f"{minutes}-{minutes + 15} mins"
