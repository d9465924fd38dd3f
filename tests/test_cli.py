"""Tests for the vc-proof-verify command."""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from vc_proof.cli import main


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handler the command installs on the package logger."""
    yield
    logger = logging.getLogger("vc_proof")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def did_document_file(tmp_path: Path, did_document) -> Path:
    path = tmp_path / "did.json"
    path.write_text(json.dumps(did_document))
    return path


def write_document(tmp_path: Path, document) -> Path:
    path = tmp_path / "credential.json"
    path.write_text(json.dumps(document))
    return path


class TestVerifyCommand:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "--did-document" in result.output

    def test_valid(self, runner, tmp_path, did_document_file, sign_ed25519, credential):
        source = write_document(tmp_path, sign_ed25519(credential))
        result = runner.invoke(main, ["--did-document", str(did_document_file), str(source)])

        assert result.exit_code == 0
        assert "VALID" in result.stdout
        assert "did:example:abc" in result.stdout

    def test_valid_json_output(self, runner, tmp_path, did_document_file, sign_jws, credential):
        source = write_document(tmp_path, sign_jws(credential))
        result = runner.invoke(
            main, ["--did-document", str(did_document_file), "--json-output", str(source)]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["status"] == "valid"
        assert data["valid"] is True
        assert data["document_type"] == "VerifiableCredential"
        assert data["proof_type"] == "JsonWebSignature2020"
        assert data["errors"] == []

    def test_tampered(self, runner, tmp_path, did_document_file, sign_ed25519, credential):
        signed = sign_ed25519(credential)
        signed["credentialSubject"]["name"] = "Tampered Name"
        source = write_document(tmp_path, signed)

        result = runner.invoke(main, ["--did-document", str(did_document_file), str(source)])

        assert result.exit_code == 1
        assert "INVALID" in result.stdout

    def test_unsupported_proof_type(
        self, runner, tmp_path, did_document_file, sign_ed25519, credential
    ):
        signed = sign_ed25519(credential)
        signed["proof"]["type"] = "RsaSignature2018"
        source = write_document(tmp_path, signed)

        result = runner.invoke(
            main, ["--did-document", str(did_document_file), "--json-output", str(source)]
        )

        assert result.exit_code == 2
        data = json.loads(result.stdout)
        assert data["status"] == "error"
        assert "RsaSignature2018" in data["errors"][0]

    def test_stdin(self, runner, did_document_file, sign_ed25519, credential):
        result = runner.invoke(
            main,
            ["--did-document", str(did_document_file), "-"],
            input=json.dumps(sign_ed25519(credential)),
        )
        assert result.exit_code == 0

    def test_file_not_found(self, runner, tmp_path):
        result = runner.invoke(main, [str(tmp_path / "missing.json")])
        assert result.exit_code == 2
        assert "File not found" in result.stdout

    def test_invalid_json(self, runner, tmp_path):
        source = tmp_path / "broken.json"
        source.write_text("{not json")

        result = runner.invoke(main, [str(source)])
        assert result.exit_code == 2
        assert "Invalid JSON" in result.stdout

    def test_not_an_object(self, runner, tmp_path):
        source = write_document(tmp_path, ["VerifiableCredential"])
        result = runner.invoke(main, ["--json-output", str(source)])

        assert result.exit_code == 2
        assert json.loads(result.stdout) == {"error": "Document must be a JSON object"}

    def test_invalid_did_document(self, runner, tmp_path, sign_ed25519, credential):
        did_file = tmp_path / "did.json"
        did_file.write_text(json.dumps({"id": "not-a-did"}))
        source = write_document(tmp_path, sign_ed25519(credential))

        result = runner.invoke(main, ["--did-document", str(did_file), str(source)])
        assert result.exit_code == 2

    def test_did_document_not_an_object(self, runner, tmp_path, sign_ed25519, credential):
        did_file = tmp_path / "did.json"
        did_file.write_text(json.dumps([{"id": "did:example:abc"}]))
        source = write_document(tmp_path, sign_ed25519(credential))

        result = runner.invoke(
            main, ["--did-document", str(did_file), "--json-output", str(source)]
        )
        assert result.exit_code == 2
        assert "must be a JSON object" in json.loads(result.stdout)["error"]

    def test_invalid_reason_in_json_output(
        self, runner, tmp_path, did_document_file, sign_ed25519, credential
    ):
        signed = sign_ed25519(credential)
        signed["credentialSubject"]["name"] = "Tampered Name"
        source = write_document(tmp_path, signed)

        result = runner.invoke(
            main, ["--did-document", str(did_document_file), "--json-output", str(source)]
        )
        assert result.exit_code == 1
        assert json.loads(result.stdout)["errors"] == ["Signature does not match the document"]
