from __future__ import annotations

import logging
from typing import Optional

from ..base import (
    LOOKUP_TYPE_CARRIER,
    LookupOptions,
    PhoneValidation,
    PhoneValidator,
    TwilioContext,
    TwilioLookupError,
)
from ..client import LookupClient
from ..utils.logger import get_logger, log_event


class TwilioLookupPhoneValidator(PhoneValidator):
    """Phone validator backed by a Twilio carrier lookup.

    The service is asked for carrier data, so the result also reports the
    carrier and line type. Any local failure is returned as an invalid
    ``PhoneValidation`` with the error in ``extra``.
    """

    source_name = "twilio"

    def __init__(
        self,
        context: TwilioContext,
        country_code: str = "",
        lookup_type: str = LOOKUP_TYPE_CARRIER,
        add_ons: str = "",
    ) -> None:
        self.client = LookupClient(context)
        self.options = LookupOptions(add_ons=add_ons, country_code=country_code, type=lookup_type)
        self.logger = get_logger("lookup.validator")

    def validate(self, phone: str) -> PhoneValidation:
        raw = phone.strip()
        try:
            outcome = self.client.lookup(raw, self.options)
        except TwilioLookupError as exc:
            log_event(
                self.logger,
                level=logging.ERROR,
                message="Twilio lookup failed",
                extra={"phone": raw, "error": str(exc)},
            )
            return PhoneValidation(
                valid=False,
                formatted=None,
                type="UNKNOWN",
                extra={"input": raw, "error": str(exc), "source": self.source_name},
            )

        if outcome.response is None:
            exception = outcome.exception
            return PhoneValidation(
                valid=False,
                formatted=None,
                type="UNKNOWN",
                extra={
                    "input": raw,
                    "status": outcome.status_code,
                    "code": exception.code if exception else 0,
                    "error": exception.message if exception else "",
                    "source": self.source_name,
                },
            )

        result = outcome.response
        carrier: Optional[str] = None
        line_type = "UNKNOWN"
        if result.carrier.error_code == 0:
            carrier = result.carrier.name or None
            line_type = result.carrier.type or "UNKNOWN"

        return PhoneValidation(
            valid=True,
            formatted=result.phone_number or raw,
            type=line_type,
            carrier=carrier,
            active=None,
            extra={
                "country_code": result.country_code,
                "national_format": result.national_format,
                "carrier_error_code": result.carrier.error_code,
                "caller_name": result.caller_name.caller_name or None,
                "source": self.source_name,
            },
        )
