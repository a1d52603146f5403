"""
Tests for the collaborator boundaries: mnemonic providers and ledger clients.
"""

import pytest

from rkeys_core.bip39 import Bip39Provider
from rkeys_core.interfaces import LedgerClient, MnemonicProvider, submit_signed_blob


class FakeLedgerClient:
    """In-memory stand-in for a node client."""

    def __init__(self, response=None, error=None):
        self.submitted = []
        self.response = response if response is not None else {"engine_result": "tesSUCCESS"}
        self.error = error

    def account_info(self, address):
        return {"account": address, "balance": "0", "sequence": 1}

    def fee(self):
        return {"base_fee": "10"}

    def submit(self, tx_blob):
        self.submitted.append(tx_blob)
        if self.error is not None:
            raise self.error
        return self.response


class NodeUnavailable(Exception):
    pass


def test_fake_client_satisfies_protocol():
    assert isinstance(FakeLedgerClient(), LedgerClient)


def test_provider_protocols():
    assert isinstance(Bip39Provider(), MnemonicProvider)
    assert not isinstance(FakeLedgerClient(), MnemonicProvider)
    assert not isinstance(Bip39Provider(), LedgerClient)


def test_submit_normalises_hex():
    client = FakeLedgerClient()
    result = submit_signed_blob(client, "12000022800000")
    assert result == {"engine_result": "tesSUCCESS"}
    assert client.submitted == ["12000022800000"]
    submit_signed_blob(client, "abcdef")
    submit_signed_blob(client, b"\x12\xab")
    assert client.submitted[1:] == ["ABCDEF", "12AB"]


def test_submit_returns_client_response_unchanged(wallet):
    response = {"engine_result": "tefPAST_SEQ", "engine_result_code": -190}
    client = FakeLedgerClient(response=response)
    blob = wallet.sign_blob("1200002280000000")
    assert submit_signed_blob(client, blob) is response


def test_client_errors_pass_through():
    error = NodeUnavailable("connection refused")
    client = FakeLedgerClient(error=error)
    with pytest.raises(NodeUnavailable) as exc_info:
        submit_signed_blob(client, "1200")
    assert exc_info.value is error


@pytest.mark.parametrize("blob", ["", b"", "xyz", "123"])
def test_submit_rejects_bad_blobs(blob):
    client = FakeLedgerClient()
    with pytest.raises(ValueError):
        submit_signed_blob(client, blob)
    assert client.submitted == []
