import pytest
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa

from jwtseal import FixedClock

NOW = 1_700_000_000


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_keys() -> dict:
    return {
        "ES256": ec.generate_private_key(ec.SECP256R1()),
        "ES384": ec.generate_private_key(ec.SECP384R1()),
        "ES512": ec.generate_private_key(ec.SECP521R1()),
    }


@pytest.fixture(scope="session")
def ed_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def key_pairs(rsa_key, ec_keys, ed_key) -> dict:
    """Map algorithm name -> (signing key, verification key)."""
    secret = b"unit-test-secret-with-enough-entropy"
    pairs = {name: (secret, secret) for name in ("HS256", "HS384", "HS512")}
    for name in ("RS256", "RS384", "RS512", "PS256", "PS384", "PS512"):
        pairs[name] = (rsa_key, rsa_key.public_key())
    for name, key in ec_keys.items():
        pairs[name] = (key, key.public_key())
    pairs["EdDSA"] = (ed_key, ed_key.public_key())
    return pairs


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)
