"""
Compute the EIP712 domain separator hash and message hash of a typed data file

    eip712-prehash payload.json
    cat payload.json | eip712-prehash - --hashes-only
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .eip712_config import DEFAULT_VERSION, DOMAIN_SEPARATOR_HASH_KEY, LOG_LEVEL, MESSAGE_HASH_KEY
from .eip712_helpers import get_eip712_digest
from .errors import TypedDataError
from .transform import TypedDataVersion, transform_typed_data


def load_payload(path: str) -> Dict[str, Any]:
    """Load typed data JSON from a file, or stdin when path is '-'"""
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def result_digest(result: Dict[str, Any]) -> bytes:
    """Signing digest from the hashes already present in a transform result"""
    domain_separator = bytes.fromhex(result[DOMAIN_SEPARATOR_HASH_KEY])
    message_hash = result.get(MESSAGE_HASH_KEY)
    return get_eip712_digest(domain_separator, bytes.fromhex(message_hash) if message_hash else None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eip712-prehash",
        description="Pre-compute EIP712 hashes for signers that cannot encode typed data",
    )
    parser.add_argument("payload", nargs="?", default="-", help="Typed data JSON file, '-' for stdin")
    parser.add_argument(
        "--version",
        default=DEFAULT_VERSION,
        choices=[v.value for v in TypedDataVersion],
        help="Typed data encoding version (only V4 is supported)",
    )
    parser.add_argument("--strict", action="store_true", help="Fail on fields missing from domain or message")
    parser.add_argument("--digest", action="store_true", help="Also output the full EIP712 signing digest")
    parser.add_argument("--hashes-only", action="store_true", help="Only output the computed hashes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else LOG_LEVEL, stream=sys.stderr)

    try:
        payload = load_payload(args.payload)
    except (OSError, ValueError) as e:
        print(f"❌ Cannot read typed data from {args.payload}: {e}", file=sys.stderr)
        return 2

    try:
        result = transform_typed_data(payload, args.version, strict=args.strict)
        if args.digest:
            result["digest"] = result_digest(result).hex()
    except TypedDataError as e:
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.hashes_only:
        keys = (DOMAIN_SEPARATOR_HASH_KEY, MESSAGE_HASH_KEY, "digest")
        result = {key: result[key] for key in keys if key in result}

    print(json.dumps(result, indent=2))
    return 0
