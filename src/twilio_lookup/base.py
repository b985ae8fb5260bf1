from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type
from urllib.parse import urlencode

import requests


LOOKUP_TYPE_CARRIER = "carrier"
LOOKUP_TYPE_CALLER_NAME = "caller-name"
LOOKUP_TYPES = (LOOKUP_TYPE_CARRIER, LOOKUP_TYPE_CALLER_NAME)

DEFAULT_LOOKUP_URL = "https://lookups.twilio.com"


class TwilioLookupError(Exception):
    """Base class for local failures of a lookup call."""


class ConfigurationError(TwilioLookupError):
    """Raised when credentials or configuration files are missing or malformed."""


class LookupTransportError(TwilioLookupError):
    """The lookup service could not be reached or its reply could not be read."""


class LookupDecodeError(TwilioLookupError):
    """The response body is not JSON or does not have the expected shape.

    Attributes:
        status_code: HTTP status of the response that failed to decode.
        body: Raw response body.
    """

    def __init__(self, message: str, status_code: int, body: bytes = b"") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ErrorBodyDecodeError(LookupDecodeError):
    """A non-200 response carried a body that is not a valid error payload."""


def _field(data: Dict[str, Any], key: str, kind: Type, default: Any) -> Any:
    # Absent keys and JSON null decode to the zero value.
    value = data.get(key)
    if value is None:
        return default
    if kind is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise ValueError(f"field '{key}' expected an integer, got {type(value).__name__}")
    if not isinstance(value, kind):
        raise ValueError(f"field '{key}' expected {kind.__name__}, got {type(value).__name__}")
    return value


def _record(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"field '{key}' expected an object, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class LookupOptions:
    """Query options sent alongside a lookup request.

    Attributes:
        add_ons: Add-on product(s) the service should invoke.
        country_code: ISO country code used to interpret national numbers.
        type: Enrichment to run, ``carrier`` or ``caller-name``.
    """

    add_ons: str = ""
    country_code: str = ""
    type: str = ""

    def query_params(self) -> List[Tuple[str, str]]:
        """Return all three parameters, including empty ones."""
        return [
            ("AddOns", self.add_ons or ""),
            ("CountryCode", self.country_code or ""),
            ("Type", self.type or ""),
        ]

    def to_query(self) -> str:
        return urlencode(self.query_params())


@dataclass(frozen=True)
class CallerNameDetails:
    caller_name: str = ""
    caller_type: str = ""
    error_code: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallerNameDetails":
        return cls(
            caller_name=_field(data, "caller_name", str, ""),
            caller_type=_field(data, "caller_type", str, ""),
            error_code=_field(data, "error_code", int, 0),
        )


@dataclass(frozen=True)
class CarrierDetails:
    mobile_country_code: str = ""
    mobile_network_code: str = ""
    name: str = ""
    type: str = ""
    error_code: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CarrierDetails":
        return cls(
            mobile_country_code=_field(data, "mobile_country_code", str, ""),
            mobile_network_code=_field(data, "mobile_network_code", str, ""),
            name=_field(data, "name", str, ""),
            type=_field(data, "type", str, ""),
            error_code=_field(data, "error_code", int, 0),
        )


@dataclass(frozen=True)
class FraudDetails:
    mobile_country_code: str = ""
    mobile_network_code: str = ""
    advanced_line_type: str = ""
    caller_name: str = ""
    is_ported: bool = False
    last_ported_date: str = ""
    error_code: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FraudDetails":
        return cls(
            mobile_country_code=_field(data, "mobile_country_code", str, ""),
            mobile_network_code=_field(data, "mobile_network_code", str, ""),
            advanced_line_type=_field(data, "advanced_line_type", str, ""),
            caller_name=_field(data, "caller_name", str, ""),
            is_ported=_field(data, "is_ported", bool, False),
            last_ported_date=_field(data, "last_ported_date", str, ""),
            error_code=_field(data, "error_code", int, 0),
        )


@dataclass(frozen=True)
class AddOnDetails:
    """Add-on status block. ``results`` is whatever JSON the add-ons returned."""

    status: str = ""
    message: str = ""
    code: int = 0
    results: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddOnDetails":
        return cls(
            status=_field(data, "status", str, ""),
            message=_field(data, "message", str, ""),
            code=_field(data, "code", int, 0),
            results=data.get("results"),
        )


@dataclass(frozen=True)
class LookupResponse:
    """Successful lookup result.

    Each nested block carries its own ``error_code``; a zero value means the
    enrichment succeeded or was not requested.
    """

    caller_name: CallerNameDetails = field(default_factory=CallerNameDetails)
    carrier: CarrierDetails = field(default_factory=CarrierDetails)
    fraud: FraudDetails = field(default_factory=FraudDetails)
    add_ons: AddOnDetails = field(default_factory=AddOnDetails)
    country_code: str = ""
    national_format: str = ""
    phone_number: str = ""
    url: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "LookupResponse":
        # A JSON null body decodes to the zero value.
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            caller_name=CallerNameDetails.from_dict(_record(data, "caller_name")),
            carrier=CarrierDetails.from_dict(_record(data, "carrier")),
            fraud=FraudDetails.from_dict(_record(data, "fraud")),
            add_ons=AddOnDetails.from_dict(_record(data, "add_ons")),
            country_code=_field(data, "country_code", str, ""),
            national_format=_field(data, "national_format", str, ""),
            phone_number=_field(data, "phone_number", str, ""),
            url=_field(data, "url", str, ""),
        )


@dataclass(frozen=True)
class TwilioException:
    """Error payload returned by the service on a non-200 status.

    Attributes:
        status: HTTP status echoed by the service.
        message: Human-readable description.
        code: Twilio error code.
        more_info: Documentation link for ``code``.
        payload: Decoded body as compact JSON text; see ``to_dict``.
    """

    status: int = 0
    message: str = ""
    code: int = 0
    more_info: str = ""
    payload: str = field(default="{}", compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "TwilioException":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return cls(
            status=_field(data, "status", int, 0),
            message=_field(data, "message", str, ""),
            code=_field(data, "code", int, 0),
            more_info=_field(data, "more_info", str, ""),
            payload=json.dumps(data, ensure_ascii=False, separators=(",", ":")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a fresh copy of the payload with the service's own field names."""
        return json.loads(self.payload)


@dataclass(frozen=True)
class LookupOutcome:
    """Result of one lookup call: exactly one of ``response``/``exception`` is set."""

    status_code: int
    response: Optional[LookupResponse] = None
    exception: Optional[TwilioException] = None

    @property
    def ok(self) -> bool:
        return self.response is not None


@dataclass(frozen=True)
class TwilioContext:
    """Credentials and transport owned by the caller.

    Attributes:
        account_sid: Account SID used as the basic-auth user.
        auth_token: Auth token used as the basic-auth password.
        lookup_url: Base URL of the Lookup service.
        session: Optional ``requests.Session`` to send through.
        timeout: Seconds passed to ``requests``; ``None`` waits indefinitely.
    """

    account_sid: str
    auth_token: str
    lookup_url: str = DEFAULT_LOOKUP_URL
    session: Optional[requests.Session] = field(default=None, compare=False, repr=False)
    timeout: Optional[float] = 10.0


@dataclass
class PhoneValidation:
    """Validation result for a phone number.

    Attributes:
        valid: Whether the phone number is considered valid.
        formatted: Normalized phone number (E.164).
        type: Line type (mobile, landline, voip, UNKNOWN, ...).
        carrier: Carrier name if available.
        active: Whether the number appears active (if provider supports it).
        extra: Optional provider-specific data.
    """

    valid: bool
    formatted: Optional[str]
    type: str
    carrier: Optional[str] = None
    active: Optional[bool] = None
    extra: Optional[Dict[str, Any]] = None


class PhoneValidator(ABC):
    """Abstract base class for validating phone numbers."""

    @abstractmethod
    def validate(self, phone: str) -> PhoneValidation:
        """Validate and normalize a phone number."""
        raise NotImplementedError
