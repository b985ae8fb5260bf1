from __future__ import annotations

import json
import logging
from typing import Optional

import requests

from .base import (
    ErrorBodyDecodeError,
    LookupDecodeError,
    LookupOptions,
    LookupOutcome,
    LookupResponse,
    LookupTransportError,
    TwilioContext,
    TwilioException,
)
from .utils.logger import get_logger, log_event


PHONE_NUMBERS_PATH = "/v1/PhoneNumbers/"


class LookupClient:
    """Client for the Twilio Lookup v1 ``PhoneNumbers`` resource.

    Holds no state besides the caller's context; each ``lookup`` call is an
    independent GET. Transport and decode problems raise, while errors the
    service reports (unknown number, bad add-on, ...) come back as a
    ``TwilioException`` inside the returned ``LookupOutcome``.
    """

    source_name = "twilio"

    def __init__(self, context: TwilioContext) -> None:
        self.context = context
        self.logger = get_logger("lookup.client")

    def build_url(self, phone_number: str) -> str:
        """Return the resource URL; the number is appended as given."""
        return self.context.lookup_url.rstrip("/") + PHONE_NUMBERS_PATH + phone_number

    def _get(self, url: str) -> requests.Response:
        http = self.context.session or requests
        try:
            return http.get(
                url,
                auth=(self.context.account_sid, self.context.auth_token),
                headers={"Accept": "application/json"},
                timeout=self.context.timeout,
                stream=True,
            )
        except requests.RequestException as exc:
            log_event(
                self.logger,
                level=logging.ERROR,
                message="Lookup request failed",
                extra={"url": url, "error": str(exc)},
            )
            raise LookupTransportError(f"Lookup request to {url} failed: {exc}") from exc

    def lookup(self, phone_number: str, options: Optional[LookupOptions] = None) -> LookupOutcome:
        """Look up ``phone_number``.

        Args:
            phone_number: Number to look up, already formatted by the caller.
            options: Query options; all parameters are sent even when empty.

        Returns:
            LookupOutcome with ``response`` on HTTP 200, ``exception`` otherwise.

        Raises:
            LookupTransportError: Connection, timeout or body read failure.
            LookupDecodeError: A 200 body that is not a valid lookup result.
            ErrorBodyDecodeError: A non-200 body that is not a valid error payload.
        """
        options = options or LookupOptions()
        url = f"{self.build_url(phone_number)}?{options.to_query()}"
        log_event(self.logger, logging.DEBUG, "Lookup request", {"url": url})

        response = self._get(url)
        with response:
            try:
                body = response.content
            except requests.RequestException as exc:
                log_event(
                    self.logger,
                    level=logging.ERROR,
                    message="Reading lookup response failed",
                    extra={"url": url, "error": str(exc)},
                )
                raise LookupTransportError(f"Reading response from {url} failed: {exc}") from exc
            status_code = response.status_code

        if status_code != requests.codes.ok:
            try:
                exception = TwilioException.from_dict(json.loads(body))
            except ValueError as exc:
                raise ErrorBodyDecodeError(
                    f"Could not decode error body (HTTP {status_code}): {exc}",
                    status_code=status_code,
                    body=body,
                ) from exc
            log_event(
                self.logger,
                level=logging.WARNING,
                message="Lookup rejected by service",
                extra={
                    "phone": phone_number,
                    "status": status_code,
                    "code": exception.code,
                    "message": exception.message,
                },
            )
            return LookupOutcome(status_code=status_code, exception=exception)

        try:
            result = LookupResponse.from_dict(json.loads(body))
        except ValueError as exc:
            raise LookupDecodeError(
                f"Could not decode lookup response: {exc}",
                status_code=status_code,
                body=body,
            ) from exc

        log_event(
            self.logger,
            level=logging.INFO,
            message="Lookup succeeded",
            extra={"phone": result.phone_number or phone_number, "type": options.type},
        )
        return LookupOutcome(status_code=status_code, response=result)


def get_lookup(
    context: TwilioContext,
    phone_number: str,
    options: Optional[LookupOptions] = None,
) -> LookupOutcome:
    """Run a single lookup with ``context``; see ``LookupClient.lookup``."""
    return LookupClient(context).lookup(phone_number, options)
