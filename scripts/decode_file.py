"""
Decode a pushed JSON document from disk and print one JSON line per element.
"""

from __future__ import annotations

import argparse
import json
import sys

from munic_decoder.decoder import iter_payloads
from munic_decoder.logging_config import setup_logging
from munic_decoder.models import record_to_dict


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    parser.add_argument("path")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--json-logs", action="store_true")
    return parser.parse_args(argv)


def decode_lines(document: str | bytes) -> list[str]:
    lines = []
    for decoded in iter_payloads(document):
        payload = {"type": decoded.type.value, "record": None}
        if decoded.record is not None:
            payload["record"] = record_to_dict(decoded.record)
        lines.append(json.dumps(payload))
    return lines


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, json_output=args.json_logs)
    with open(args.path, "rb") as handle:
        document = handle.read()
    for line in decode_lines(document):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
