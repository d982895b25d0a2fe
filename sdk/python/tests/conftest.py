import pytest
from fakes import FakeConnection, FakeFeeRelayer, RecordingKeypairFactory
from solders.keypair import Keypair
from solders.pubkey import Pubkey


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def keypair_factory():
    return RecordingKeypairFactory()


@pytest.fixture
def owner(connection):
    keypair = Keypair()
    connection.add_wallet(keypair.pubkey())
    return keypair


@pytest.fixture
def fee_relayer():
    return FakeFeeRelayer()


@pytest.fixture
def mint_a():
    return Pubkey.new_unique()


@pytest.fixture
def mint_b():
    return Pubkey.new_unique()
