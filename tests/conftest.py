"""Shared fixtures for ticketseal tests."""

from __future__ import annotations

import pytest
from pytest_metadata.plugin import metadata_key

from ticketseal.host.backends import MemoryBackend
from ticketseal.host.runtime import ContractHost
from ticketseal.models.messages import AuthorizeIssuer

from tests.factories import BLOCK_TIME, ISSUER, OWNER, make_store
from tests.mocks import DictStorage, MockEntropy


def pytest_configure(config):
    """Add protocol info to the report Environment table."""
    meta = config.stash.setdefault(metadata_key, {})
    meta["Signature scheme"] = "ed25519 (stellar_sdk.Keypair)"
    meta["Payload encoding"] = "Stellar XDR SCVal"


@pytest.fixture
def storage():
    return DictStorage()


@pytest.fixture
def store(storage):
    """StateStore with the contract instantiated and ISSUER authorized."""
    return make_store(storage)


@pytest.fixture
def entropy():
    return MockEntropy()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
async def host(backend, entropy):
    """Started ContractHost, instantiated by OWNER with ISSUER authorized."""
    h = ContractHost(backend, entropy=entropy, clock=lambda: BLOCK_TIME)
    await h.start()
    result = await h.instantiate(OWNER)
    assert result.success
    result = await h.execute(OWNER, AuthorizeIssuer(address=ISSUER))
    assert result.success
    yield h
    await h.close()
