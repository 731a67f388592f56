"""didtrust command line."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from didtrust.anchor import anchor_from_public_key, provider_from_private_key, public_key_from_did
from didtrust.did import from_string
from didtrust.errors import InvalidSignatureError
from didtrust.keys import generate_key_pair, unmarshal_private_key
from didtrust.resolver import AnchorResolver
from didtrust.types import KeyType

KEY_TYPE_CHOICES = [key_type.name.lower() for key_type in KeyType]


def _key_type(name: str) -> KeyType:
    return KeyType[name.upper()]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="didtrust", description="did:key identities")
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate a key pair and its DID")
    generate_parser.add_argument("--key-type", choices=KEY_TYPE_CHOICES, default="ed25519")
    generate_parser.add_argument("--json", action="store_true")

    resolve_parser = subparsers.add_parser("resolve", help="Recover the public key of a DID")
    resolve_parser.add_argument("did")
    resolve_parser.add_argument("--json", action="store_true")

    sign_parser = subparsers.add_parser("sign", help="Sign a message with a private key")
    sign_parser.add_argument("--key-type", choices=KEY_TYPE_CHOICES, default="ed25519")
    sign_parser.add_argument("--private-key", required=True, help="hex-encoded private key")
    sign_parser.add_argument("message")
    sign_parser.add_argument("--json", action="store_true")

    verify_parser = subparsers.add_parser("verify", help="Verify a signature against a DID")
    verify_parser.add_argument("did")
    verify_parser.add_argument("message")
    verify_parser.add_argument("signature", help="hex-encoded signature")
    verify_parser.add_argument("--json", action="store_true")

    return parser


def _emit(args: argparse.Namespace, payload: dict[str, object]) -> None:
    if args.json:
        print(json.dumps(payload, sort_keys=True))
        return
    for key, value in payload.items():
        if key != "command":
            print(f"{key}: {value}")


def _run(args: argparse.Namespace) -> int:
    if args.command == "generate":
        privk, pubk = generate_key_pair(_key_type(args.key_type))
        anchor = anchor_from_public_key(pubk)
        _emit(args, {
            "command": "generate",
            "did": anchor.did.uri,
            "key_type": args.key_type,
            "public_key": pubk.raw().hex(),
            "private_key": privk.raw().hex(),
        })
        return 0

    if args.command == "resolve":
        did = from_string(args.did)
        pubk = public_key_from_did(did)
        _emit(args, {
            "command": "resolve",
            "did": did.uri,
            "method": did.method,
            "key_type": KeyType(pubk.key_type).name.lower(),
            "public_key": pubk.raw().hex(),
        })
        return 0

    if args.command == "sign":
        privk = unmarshal_private_key(_key_type(args.key_type), bytes.fromhex(args.private_key))
        provider = provider_from_private_key(privk)
        signature = provider.sign(args.message.encode("utf-8"))
        _emit(args, {
            "command": "sign",
            "did": provider.did.uri,
            "signature": signature.hex(),
        })
        return 0

    if args.command == "verify":
        did = from_string(args.did)
        anchor = AnchorResolver().resolve(did)
        try:
            anchor.verify(args.message.encode("utf-8"), bytes.fromhex(args.signature))
            valid = True
        except InvalidSignatureError:
            valid = False
        _emit(args, {"command": "verify", "did": did.uri, "valid": valid})
        return 0 if valid else 1

    return 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        return _run(args)
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
