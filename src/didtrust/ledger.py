"""Signing provider backed by a Ledger hardware wallet through ``ledger-cli``."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path

from ecdsa import SECP256k1
from ecdsa.util import sigencode_der

from didtrust.anchor import PublicKeyAnchor, from_public_key
from didtrust.did import DID
from didtrust.errors import HardwareKeyError, InvalidKeyError, LedgerError
from didtrust.keys import EthPublicKey, PrivateKey, unmarshal_eth_public_key
from didtrust.types import JsonDict, LedgerKeyOutput, LedgerSignECDSAOutput, LedgerSignOutput

logger = logging.getLogger(__name__)

LEDGER_CLI = "ledger-cli"


def _get_ledger_cli(explicit_cli: str | None = None) -> str:
    return explicit_cli or os.environ.get("DIDTRUST_LEDGER_CLI") or LEDGER_CLI


def _key_output_from_dict(value: JsonDict) -> LedgerKeyOutput:
    return LedgerKeyOutput(
        key=str(value.get("key", "")),
        address=str(value.get("address", "")),
    )


def _sign_output_from_dict(value: JsonDict) -> LedgerSignOutput:
    ecdsa_raw = value.get("ecdsa")
    if not isinstance(ecdsa_raw, dict):
        raise LedgerError("parse ledger output: ecdsa signature is missing")
    return LedgerSignOutput(
        ecdsa=LedgerSignECDSAOutput(
            v=int(ecdsa_raw.get("v", 0)),
            r=str(ecdsa_raw.get("r", "")),
            s=str(ecdsa_raw.get("s", "")),
        ),
    )


def _ledger_exec(cli: str, output_path: Path, *args: str) -> JsonDict:
    ledger = shutil.which(cli)
    if ledger is None:
        raise LedgerError(f"can't find {cli} in PATH")

    logger.debug("Running %s %s", ledger, args[0] if args else "")
    try:
        subprocess.run([ledger, *args], check=True)
    except (OSError, subprocess.CalledProcessError) as error:
        raise LedgerError(f"error executing ledger cli: {error}") from error

    try:
        raw = json.loads(output_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as error:
        raise LedgerError(f"parse ledger output: {error}") from error

    if not isinstance(raw, dict):
        raise LedgerError(f"parse ledger output: expected an object, got {type(raw).__name__}")
    return JsonDict(raw)


def _run_with_output_file(cli: str, command: str, account: int, *extra: str) -> JsonDict:
    fd, tmp = tempfile.mkstemp(prefix="ledger", suffix=".out")
    os.close(fd)
    output_path = Path(tmp)
    try:
        return _ledger_exec(cli, output_path, command, "-o", tmp, "-a", str(account), *extra)
    finally:
        output_path.unlink(missing_ok=True)


def _decode_hex(value: str, what: str) -> bytes:
    try:
        return bytes.fromhex(value.removeprefix("0x"))
    except ValueError as error:
        raise LedgerError(f"decode {what}: {error}") from error


@dataclass(frozen=True)
class LedgerWalletProvider:
    did: DID
    pubk: EthPublicKey
    account: int
    cli: str = LEDGER_CLI

    @classmethod
    def open(cls, account: int = 0, cli: str | None = None) -> LedgerWalletProvider:
        """Read the account's public key from the device."""
        ledger_cli = _get_ledger_cli(cli)
        output = _key_output_from_dict(_run_with_output_file(ledger_cli, "key", account))

        raw = _decode_hex(output.key, "ledger key")
        try:
            pubk = unmarshal_eth_public_key(raw)
        except InvalidKeyError as error:
            raise LedgerError(f"unmarshal ledger raw key: {error}") from error

        return cls(did=from_public_key(pubk), pubk=pubk, account=account, cli=ledger_cli)

    def sign(self, data: bytes) -> bytes:
        output = _sign_output_from_dict(
            _run_with_output_file(self.cli, "sign", self.account, data.hex()),
        )

        r = int.from_bytes(_decode_hex(output.ecdsa.r, "signature r"), "big")
        s = int.from_bytes(_decode_hex(output.ecdsa.s, "signature s"), "big")
        if r >= SECP256k1.order:
            raise LedgerError("signature r overflowed")
        if s >= SECP256k1.order:
            raise LedgerError("signature s overflowed")

        return sigencode_der(r, s, SECP256k1.order)

    def anchor(self) -> PublicKeyAnchor:
        return PublicKeyAnchor(did=self.did, public_key=self.pubk)

    def private_key(self) -> PrivateKey:
        raise HardwareKeyError("ledger private key cannot be exported")
