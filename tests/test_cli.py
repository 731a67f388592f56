import json

from didtrust.cli import main


def _json_output(capsys) -> dict:
    captured = capsys.readouterr()
    assert captured.err == ""
    return json.loads(captured.out.strip())


def test_cli_generate_json(capsys) -> None:
    exit_code = main(["generate", "--json"])

    payload = _json_output(capsys)
    assert exit_code == 0
    assert payload["command"] == "generate"
    assert payload["key_type"] == "ed25519"
    assert payload["did"].startswith("did:key:z6Mk")
    assert len(payload["public_key"]) == 64


def test_cli_resolve_json(capsys) -> None:
    main(["generate", "--key-type", "secp256k1", "--json"])
    generated = _json_output(capsys)

    exit_code = main(["resolve", generated["did"], "--json"])

    payload = _json_output(capsys)
    assert exit_code == 0
    assert payload["method"] == "key"
    assert payload["key_type"] == "secp256k1"
    assert payload["public_key"] == generated["public_key"]


def test_cli_sign_then_verify(capsys) -> None:
    main(["generate", "--key-type", "eth", "--json"])
    generated = _json_output(capsys)

    main(["sign", "--key-type", "eth", "--private-key", generated["private_key"], "hello", "--json"])
    signed = _json_output(capsys)
    assert signed["did"] == generated["did"]

    exit_code = main(["verify", generated["did"], "hello", signed["signature"], "--json"])
    assert exit_code == 0
    assert _json_output(capsys)["valid"] is True

    exit_code = main(["verify", generated["did"], "goodbye", signed["signature"], "--json"])
    assert exit_code == 1
    assert _json_output(capsys)["valid"] is False


def test_cli_reports_invalid_did(capsys) -> None:
    exit_code = main(["resolve", "did:web:example.com"])

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert captured.err.startswith("error: ")
