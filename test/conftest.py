import pytest

from eip712_prehash.schema import TypeSchema

DOMAIN_FIELDS = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


@pytest.fixture
def mail_payload():
    """The Mail example from EIP-712"""
    return {
        "types": {
            "EIP712Domain": list(DOMAIN_FIELDS),
            "Person": [
                {"name": "name", "type": "string"},
                {"name": "wallet", "type": "address"},
            ],
            "Mail": [
                {"name": "from", "type": "Person"},
                {"name": "to", "type": "Person"},
                {"name": "contents", "type": "string"},
            ],
        },
        "primaryType": "Mail",
        "domain": {
            "name": "Ether Mail",
            "version": "1",
            "chainId": 1,
            "verifyingContract": "0xCcCCccccCCCCcCCCCCCcCcCccCcCCCcCcccccccC",
        },
        "message": {
            "from": {"name": "Cow", "wallet": "0xCD2a3d9F938E13CD947Ec05AbC7FE734Df8DD826"},
            "to": {"name": "Bob", "wallet": "0xbBbBBBBbbBBBbbbBbbBbbbbBBbBbbbbBbBbbBBbB"},
            "contents": "Hello, Bob!",
        },
    }


@pytest.fixture
def mail_schema(mail_payload):
    return TypeSchema.from_payload(mail_payload)


@pytest.fixture
def amount_payload():
    """Minimal payload whose message holds an amount beyond 64 bit range"""
    return {
        "types": {
            "EIP712Domain": list(DOMAIN_FIELDS),
            "Transfer": [{"name": "amount", "type": "uint256"}],
        },
        "primaryType": "Transfer",
        "domain": {
            "name": "Test",
            "version": "1",
            "chainId": 1,
            "verifyingContract": "0x0000000000000000000000000000000000000000",
        },
        "message": {"amount": 123456789012345678901234567890},
    }


class SpyHash:
    """keccak256 stand-in that records every call"""

    def __init__(self, wrapped):
        self.wrapped = wrapped
        self.calls = []

    def __call__(self, data):
        self.calls.append(data)
        return self.wrapped(data)


@pytest.fixture
def spy_hash():
    from eip712_prehash.eip712_helpers import keccak256

    return SpyHash(keccak256)
