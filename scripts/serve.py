"""
Run the push receiver.

Settings come from --config (or MUNIC_CONFIG) plus MUNIC_* overrides.
"""

from __future__ import annotations

import argparse
import sys

from munic_decoder.config import load_settings
from munic_decoder.server import run
from munic_decoder.validation import validate_settings


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default=None, help="Path to decoder.yaml")
    parser.add_argument("--strict", action="store_true", help="Exit on validation warnings")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args.config)
    warnings = validate_settings(settings)
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)
    if warnings and args.strict:
        return 1
    run(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
