"""Tests for batch lookups over a DataFrame."""

from unittest.mock import Mock

import pandas as pd

from twilio_lookup.base import (
    CarrierDetails,
    LookupOptions,
    LookupOutcome,
    LookupResponse,
    LookupTransportError,
    TwilioException,
)
from twilio_lookup.batch import RESULT_COLUMNS, lookup_all_phones
from twilio_lookup.normalize import E164Normalizer


def _fake_lookup(number, options=None):
    if number == "+34612345678":
        return LookupOutcome(
            status_code=200,
            response=LookupResponse(
                carrier=CarrierDetails(
                    mobile_country_code="214",
                    mobile_network_code="01",
                    name="Vodafone Spain",
                    type="mobile",
                ),
                country_code="ES",
                national_format="612 34 56 78",
                phone_number="+34612345678",
            ),
        )
    if number == "+34912345678":
        raise LookupTransportError("connection reset")
    return LookupOutcome(
        status_code=404,
        exception=TwilioException(status=404, message="not found", code=20404),
    )


class TestLookupAllPhones:
    def _client(self):
        client = Mock()
        client.lookup = Mock(side_effect=_fake_lookup)
        return client

    def test_rows_get_status_and_result_columns(self):
        df = pd.DataFrame(
            {
                "NOMBRE": ["A", "B", "C", "D", "E"],
                "TELEFONO": ["612 345 678", None, "12", "+34 912 345 678", "+34 600 000 000"],
            }
        )
        client = self._client()

        result, report = lookup_all_phones(
            df,
            client,
            LookupOptions(type="carrier"),
            normalizer=E164Normalizer(region="ES"),
        )

        assert list(result["LOOKUP_STATUS"]) == ["ok", "empty", "invalid", "failed", "rejected"]
        assert result.loc[0, "CARRIER_NAME"] == "Vodafone Spain"
        assert result.loc[0, "CARRIER_MCC"] == "214"
        assert result.loc[0, "LOOKUP_PHONE"] == "+34612345678"
        assert result.loc[3, "LOOKUP_ERROR"] == "connection reset"
        assert result.loc[4, "LOOKUP_ERROR"] == "not found"
        assert report.total == 5
        assert report.found == 1
        assert report.skipped == 2
        assert report.failed == 1
        assert report.rejected == 1
        assert len(report.errors) == 2
        # Skipped rows never reach the service
        assert client.lookup.call_count == 3
        assert client.lookup.call_args_list[0].args == ("+34612345678", LookupOptions(type="carrier"))

    def test_input_frame_is_not_modified(self):
        df = pd.DataFrame({"TELEFONO": ["+34612345678"]})

        lookup_all_phones(df, self._client())

        assert list(df.columns) == ["TELEFONO"]

    def test_numbers_sent_as_written_without_normalizer(self):
        df = pd.DataFrame({"PHONE": ["612345678"]})
        client = self._client()

        result, report = lookup_all_phones(df, client, phone_column="PHONE")

        client.lookup.assert_called_once_with("612345678", None)
        assert result.loc[0, "LOOKUP_STATUS"] == "rejected"
        assert report.rejected == 1

    def test_missing_column_skips_everything(self):
        df = pd.DataFrame({"OTHER": ["x", "y"]})
        client = self._client()

        result, report = lookup_all_phones(df, client)

        assert set(RESULT_COLUMNS) <= set(result.columns)
        assert report.skipped == 2
        client.lookup.assert_not_called()
