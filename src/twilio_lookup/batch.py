"""Batch phone lookups over a DataFrame.

Runs one lookup per row and adds the result columns next to the input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import pandas as pd

from .base import LookupOptions, TwilioLookupError
from .client import LookupClient
from .normalize import E164Normalizer
from .utils.logger import get_logger

RESULT_COLUMNS = [
    "LOOKUP_STATUS",
    "LOOKUP_PHONE",
    "LOOKUP_NATIONAL_FORMAT",
    "LOOKUP_COUNTRY",
    "CARRIER_NAME",
    "CARRIER_TYPE",
    "CARRIER_MCC",
    "CARRIER_MNC",
    "CALLER_NAME",
    "CALLER_TYPE",
    "LOOKUP_ERROR",
]


@dataclass
class BatchReport:
    """Aggregated statistics for a batch lookup run."""

    total: int = 0
    found: int = 0
    rejected: int = 0
    skipped: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "found": self.found,
            "rejected": self.rejected,
            "skipped": self.skipped,
            "failed": self.failed,
            "errors": self.errors,
        }


def lookup_all_phones(
    df: pd.DataFrame,
    client: LookupClient,
    options: Optional[LookupOptions] = None,
    phone_column: str = "TELEFONO",
    normalizer: Optional[E164Normalizer] = None,
) -> Tuple[pd.DataFrame, BatchReport]:
    """Look up every phone in ``phone_column``.

    Adds the ``RESULT_COLUMNS``. ``LOOKUP_STATUS`` is one of ``ok``,
    ``rejected`` (the service returned an error payload), ``failed`` (transport
    or decode error), ``empty`` or ``invalid`` (the normalizer refused it).

    Args:
        df: Input DataFrame.
        client: Client used for every row.
        options: Query options shared by all rows.
        phone_column: Column holding the numbers.
        normalizer: Optional E.164 normalizer; when given, numbers are sent
            in E.164 form and numbers it cannot normalize are not sent at all.

    Returns:
        A copy of ``df`` with result columns, and the run report.
    """
    logger = get_logger("lookup.batch")
    df_result = df.copy()
    for column in RESULT_COLUMNS:
        if column not in df_result.columns:
            df_result[column] = ""

    report = BatchReport(total=len(df_result))

    if phone_column not in df_result.columns:
        logger.warning(f"Phone column '{phone_column}' not found in DataFrame")
        report.skipped = report.total
        return df_result, report

    logger.info(f"Looking up phones for {len(df_result)} rows")

    for idx, row in df_result.iterrows():
        phone = row.get(phone_column)

        if pd.isna(phone) or not str(phone).strip():
            df_result.loc[idx, "LOOKUP_STATUS"] = "empty"
            report.skipped += 1
            continue

        number = str(phone).strip()
        if normalizer is not None:
            normalized = normalizer.normalize(number)
            if normalized is None:
                df_result.loc[idx, "LOOKUP_STATUS"] = "invalid"
                df_result.loc[idx, "LOOKUP_ERROR"] = "invalid_format"
                report.skipped += 1
                continue
            number = normalized

        try:
            outcome = client.lookup(number, options)
        except TwilioLookupError as exc:
            df_result.loc[idx, "LOOKUP_STATUS"] = "failed"
            df_result.loc[idx, "LOOKUP_ERROR"] = str(exc)
            report.failed += 1
            report.errors.append(f"{number}: {exc}")
            continue

        if outcome.response is None:
            exception = outcome.exception
            message = exception.message if exception else f"HTTP {outcome.status_code}"
            df_result.loc[idx, "LOOKUP_STATUS"] = "rejected"
            df_result.loc[idx, "LOOKUP_ERROR"] = message
            report.rejected += 1
            report.errors.append(f"{number}: {message}")
            continue

        result = outcome.response
        df_result.loc[idx, "LOOKUP_STATUS"] = "ok"
        df_result.loc[idx, "LOOKUP_PHONE"] = result.phone_number
        df_result.loc[idx, "LOOKUP_NATIONAL_FORMAT"] = result.national_format
        df_result.loc[idx, "LOOKUP_COUNTRY"] = result.country_code
        df_result.loc[idx, "CARRIER_NAME"] = result.carrier.name
        df_result.loc[idx, "CARRIER_TYPE"] = result.carrier.type
        df_result.loc[idx, "CARRIER_MCC"] = result.carrier.mobile_country_code
        df_result.loc[idx, "CARRIER_MNC"] = result.carrier.mobile_network_code
        df_result.loc[idx, "CALLER_NAME"] = result.caller_name.caller_name
        df_result.loc[idx, "CALLER_TYPE"] = result.caller_name.caller_type
        report.found += 1

    logger.info(
        f"Phone lookup complete: {report.found} found, {report.rejected} rejected, "
        f"{report.failed} failed, {report.skipped} skipped"
    )
    return df_result, report
