"""E.164 normalization of batch input before it is sent to Twilio."""

from __future__ import annotations

from typing import Optional

import phonenumbers


class E164Normalizer:
    """Turn loosely written numbers into E.164 using ``region`` as the default.

    Numbers written with a leading ``+`` keep their own country code.
    """

    def __init__(self, region: str = "US") -> None:
        self.region = region.upper()

    def normalize(self, phone: str) -> Optional[str]:
        """Return the E.164 form of ``phone``, or ``None`` if it is not a valid number."""
        raw = phone.strip()
        if not raw:
            return None
        try:
            parsed = phonenumbers.parse(raw, self.region)
        except phonenumbers.NumberParseException:
            return None
        if not phonenumbers.is_valid_number(parsed):
            return None
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
