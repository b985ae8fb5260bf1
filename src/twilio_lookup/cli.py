from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import pandas as pd

from .base import LOOKUP_TYPES, LookupOptions, TwilioLookupError
from .batch import lookup_all_phones
from .client import LookupClient
from .normalize import E164Normalizer
from .utils.config_loader import (
    DEFAULT_API_KEYS_PATH,
    DEFAULT_CONFIG_PATH,
    load_context_from_config,
    load_lookup_config,
    load_yaml_config,
)
from .utils.logger import setup_logger


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Twilio phone number lookup CLI")
    parser.add_argument("phone", nargs="?", help="Phone number to look up (E.164 recommended)")
    parser.add_argument("--input", help="Input CSV with phone numbers (batch mode)")
    parser.add_argument("--output", help="Output enriched CSV path (batch mode)")
    parser.add_argument("--column", help="Phone column in the input CSV")
    parser.add_argument("--region", help="Default region used to normalize batch numbers to E.164")
    parser.add_argument("--no-normalize", action="store_true", help="Send batch numbers as written")
    parser.add_argument("--type", choices=LOOKUP_TYPES, help="Lookup type")
    parser.add_argument("--country-code", help="Country code hint for national numbers")
    parser.add_argument("--add-ons", help="Add-on(s) to run with the lookup")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Lookup config YAML path")
    parser.add_argument("--api-keys", default=DEFAULT_API_KEYS_PATH, help="API keys YAML path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    parser.add_argument("--log-file", type=Path, help="Optional log file")
    args = parser.parse_args(argv)

    if args.input is None and args.phone is None:
        parser.error("either a phone number or --input is required")
    if args.input is not None and args.output is None:
        parser.error("--output is required with --input")
    return args


def build_options(args: argparse.Namespace, lookup_cfg: dict) -> LookupOptions:
    """Command line flags win over the config file defaults."""
    return LookupOptions(
        add_ons=args.add_ons if args.add_ons is not None else str(lookup_cfg.get("add_ons") or ""),
        country_code=(
            args.country_code
            if args.country_code is not None
            else str(lookup_cfg.get("default_country_code") or "")
        ),
        type=args.type if args.type is not None else str(lookup_cfg.get("default_type") or ""),
    )


def run_single(client: LookupClient, phone: str, options: LookupOptions) -> int:
    outcome = client.lookup(phone, options)
    if outcome.response is not None:
        print(json.dumps(asdict(outcome.response), ensure_ascii=False, indent=2))
        return 0
    payload = outcome.exception.to_dict() if outcome.exception else {"status": outcome.status_code}
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 1


def run_batch(client: LookupClient, args: argparse.Namespace, options: LookupOptions) -> int:
    try:
        batch_cfg = load_yaml_config(args.config).get("batch", {}) or {}
    except FileNotFoundError:
        batch_cfg = {}
    column = args.column or batch_cfg.get("phone_column", "TELEFONO")
    region = args.region or batch_cfg.get("region", "US")
    normalizer = None if args.no_normalize else E164Normalizer(region=region)

    input_path = Path(args.input)
    output_path = Path(args.output)

    df = pd.read_csv(input_path, dtype=str)
    enriched_df, report = lookup_all_phones(
        df, client, options, phone_column=column, normalizer=normalizer
    )
    enriched_df.to_csv(output_path, index=False)

    report_path = output_path.with_suffix(".report.json")
    with report_path.open("w", encoding="utf-8") as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logger("lookup", log_level=args.log_level, log_file=args.log_file)

    try:
        lookup_cfg = load_lookup_config(args.config)
        context = load_context_from_config(args.config, args.api_keys)
        client = LookupClient(context)
        options = build_options(args, lookup_cfg)
        if args.input is not None:
            return run_batch(client, args, options)
        return run_single(client, args.phone, options)
    except (TwilioLookupError, OSError, pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
