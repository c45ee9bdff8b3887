from __future__ import annotations

import re
from functools import reduce

from distcore.config import TIME_ZONE_MAX, TIME_ZONE_MIN

_NON_DIGITS = re.compile(r"[^0-9]")


def derive_time_zone(customer_id: object) -> int:
    """Map a customer identifier to a synthetic GMT offset in [-12, 12].

    Only the ASCII digits of the identifier matter: "HOSP-100" and "100"
    map to the same offset. Identifiers without digits map to 0.
    """
    digits = _NON_DIGITS.sub("", "" if customer_id is None else str(customer_id))
    if not digits:
        return 0
    span = TIME_ZONE_MAX - TIME_ZONE_MIN + 1
    # digit-wise modulus; int() on the whole string is capped at 4300 digits
    remainder = reduce(lambda acc, d: (acc * 10 + int(d)) % span, digits, 0)
    return remainder + TIME_ZONE_MIN
