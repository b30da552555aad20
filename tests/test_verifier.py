import asyncio
import json
from datetime import timedelta

import pytest

from jwtseal import (
    DEFAULT_REGISTRY,
    Algorithm,
    ClaimsDecodeError,
    ExpectedClaims,
    InvalidClaimError,
    InvalidSignatureError,
    StandardClaims,
    TokenBlockedError,
    TokenEncodingError,
    TokenExpiredError,
    TokenIssuedInFutureError,
    TokenIssuer,
    TokenNotYetValidError,
    TokenVerifier,
    UnknownAlgorithmError,
    VerifierConfig,
    check,
    sign,
    verify,
)
from jwtseal.token import codec

SECRET = b"verifier-secret"


def _verifier(clock, **config) -> TokenVerifier:
    return TokenVerifier(SECRET, config=VerifierConfig(clock=clock, **config))


def _issue(clock, *sources, **kwargs) -> str:
    return TokenIssuer("HS256", SECRET, clock=clock).sign(*sources, **kwargs)


def _flip(data: bytes, bit: int) -> bytes:
    flipped = bytearray(data)
    flipped[bit // 8] ^= 1 << (bit % 8)
    return bytes(flipped)


@pytest.mark.parametrize("name", [a.value for a in Algorithm])
def test_round_trip_preserves_standard_claims(name, key_pairs, clock) -> None:
    signing_key, verification_key = key_pairs[name]
    standard = StandardClaims(
        not_before=clock(),
        issued_at=clock(),
        expiry=clock() + 300,
        id="id-1",
        issuer="auth.example",
        subject="user-1",
        audience=("api", "admin"),
    )
    token = TokenIssuer(name, signing_key, clock=clock).sign(standard, {"role": "ops"})

    verified = TokenVerifier(verification_key, config=VerifierConfig(clock=clock)).verify(token)

    assert verified.header.alg == name
    assert verified.standard_claims == standard
    assert verified.claims["role"] == "ops"
    assert verified.token == token


def test_short_lived_session_token(clock) -> None:
    token = sign("HS256", SECRET, {"foo": "bar"}, max_age=timedelta(minutes=15), clock=clock)
    assert token.count(".") == 2

    verified = verify(token, SECRET, config=VerifierConfig(clock=clock))
    assert verified.decode() == {"foo": "bar", "iat": clock(), "exp": clock() + 900}
    assert verified.standard_claims.expiry == verified.standard_claims.issued_at + 900
    assert {k: v for k, v in verified.claims.items() if k not in ("iat", "exp")} == {"foo": "bar"}

    clock.advance(timedelta(minutes=16))
    result = check(token, SECRET, config=VerifierConfig(clock=clock))
    assert (result.valid, result.reason) == (False, "token_expired")


def test_every_payload_and_signature_bit_flip_is_rejected(clock) -> None:
    token = _issue(clock, {"sub": "u1"}, max_age=60)
    header_segment, payload_segment, signature_segment = token.split(".")
    payload = codec.b64url_decode(payload_segment.encode())
    signature = codec.b64url_decode(signature_segment.encode())
    verifier = _verifier(clock)

    for bit in range(len(payload) * 8):
        tampered = ".".join([header_segment, codec.b64url_encode(_flip(payload, bit)).decode(), signature_segment])
        with pytest.raises(InvalidSignatureError):
            verifier.verify(tampered)

    for bit in range(len(signature) * 8):
        tampered = f"{header_segment}.{payload_segment}." + codec.b64url_encode(_flip(signature, bit)).decode()
        with pytest.raises(InvalidSignatureError):
            verifier.verify(tampered)


def test_header_bit_flips_are_rejected(clock) -> None:
    token = _issue(clock, {"sub": "u1"})
    header, rest = token.split(".", 1)
    header_bytes = codec.b64url_decode(header.encode())
    start = header_bytes.index(b'"JWT"') + 1
    verifier = _verifier(clock)

    for offset in range(3):
        for bit in (0, 1, 2, 4, 5):
            flipped = _flip(header_bytes, (start + offset) * 8 + bit)
            with pytest.raises(InvalidSignatureError):
                verifier.verify(codec.b64url_encode(flipped).decode() + "." + rest)


def test_ecdsa_signature_bit_flips_are_rejected(ec_keys, clock) -> None:
    key = ec_keys["ES256"]
    token = TokenIssuer("ES256", key, clock=clock).sign({"sub": "u1"})
    prefix, signature_segment = token.rsplit(".", 1)
    signature = codec.b64url_decode(signature_segment.encode())
    verifier = TokenVerifier(key.public_key(), config=VerifierConfig(clock=clock))

    for bit in range(0, len(signature) * 8, 7):
        with pytest.raises(InvalidSignatureError):
            verifier.verify(prefix + "." + codec.b64url_encode(_flip(signature, bit)).decode())


def test_expiry_boundary(clock) -> None:
    token = _issue(clock, {"exp": clock()})
    assert _verifier(clock).verify(token).standard_claims.expiry == clock()

    clock.advance(1)
    with pytest.raises(TokenExpiredError):
        _verifier(clock).verify(token)
    assert _verifier(clock, leeway=1).verify(token)

    clock.advance(1)
    with pytest.raises(TokenExpiredError):
        _verifier(clock, leeway=1).verify(token)


def test_not_before_boundary(clock) -> None:
    token = _issue(clock, {"nbf": clock() + 10})
    with pytest.raises(TokenNotYetValidError):
        _verifier(clock).verify(token)
    assert _verifier(clock, leeway=timedelta(seconds=10)).verify(token)

    clock.advance(9)
    with pytest.raises(TokenNotYetValidError):
        _verifier(clock).verify(token)
    clock.advance(1)
    assert _verifier(clock).verify(token)


def test_future_issued_at_is_informational_by_default(clock) -> None:
    token = _issue(clock, {"iat": clock() + 120})
    assert _verifier(clock).verify(token).standard_claims.issued_at == clock() + 120

    with pytest.raises(TokenIssuedInFutureError):
        _verifier(clock, reject_future_issued_at=True).verify(token)
    assert _verifier(clock, reject_future_issued_at=True, leeway=120).verify(token)


def test_token_without_time_claims_never_expires(clock) -> None:
    token = _issue(clock, {"sub": "u1"})
    clock.advance(timedelta(days=3650))
    assert _verifier(clock).verify(token).standard_claims.expiry is None


def test_expected_claims(clock) -> None:
    token = _issue(clock, StandardClaims(issuer="auth", subject="u1", audience=["api", "web"], id="t-9"))

    ok = ExpectedClaims(issuer="auth", subject="u1", audience="web", id="t-9")
    assert _verifier(clock, expected=ok).verify(token)

    for expected in (
        ExpectedClaims(issuer="other"),
        ExpectedClaims(subject="u2"),
        ExpectedClaims(audience=["mobile"]),
        ExpectedClaims(id="t-1"),
    ):
        with pytest.raises(InvalidClaimError):
            _verifier(clock, expected=expected).verify(token)

    no_audience = _issue(clock, {"sub": "u1"})
    with pytest.raises(InvalidClaimError):
        _verifier(clock, expected=ExpectedClaims(audience="api")).verify(no_audience)


def test_allowed_algorithms(clock) -> None:
    token = _issue(clock, {"sub": "u1"})
    assert _verifier(clock, allowed_algorithms={"HS256", "HS512"}).verify(token)
    with pytest.raises(UnknownAlgorithmError):
        _verifier(clock, allowed_algorithms={Algorithm.HS512}).verify(token)


def test_algorithm_confusion_is_rejected(rsa_key, clock) -> None:
    public_key = rsa_key.public_key()
    rs_token = TokenIssuer("RS256", rsa_key, clock=clock).sign({"sub": "u1"})
    with pytest.raises(InvalidSignatureError):
        TokenVerifier(SECRET, config=VerifierConfig(clock=clock)).verify(rs_token)

    hs_token = _issue(clock, {"sub": "u1"})
    with pytest.raises(InvalidSignatureError):
        TokenVerifier(public_key, config=VerifierConfig(clock=clock)).verify(hs_token)


def test_signature_is_checked_before_time_claims(clock) -> None:
    token = _issue(clock, {"exp": clock() - 100})
    forged = token.rsplit(".", 1)[0] + "." + codec.b64url_encode(b"\x00" * 32).decode()
    with pytest.raises(InvalidSignatureError):
        _verifier(clock).verify(forged)
    with pytest.raises(TokenExpiredError):
        _verifier(clock).verify(token)


def test_signed_non_object_payload_is_a_decode_error(clock) -> None:
    header = codec.encode_json_segment({"alg": "HS256", "typ": "JWT"})
    prefix = header + b"." + codec.b64url_encode(json.dumps(["sub", "u1"]).encode())
    token = codec.join(prefix, DEFAULT_REGISTRY.get("HS256").sign(SECRET, prefix))
    with pytest.raises(ClaimsDecodeError):
        _verifier(clock).verify(token)


def test_signed_bad_time_claim_is_a_decode_error(clock) -> None:
    with pytest.raises(ClaimsDecodeError):
        _issue(clock, {"exp": "soon"})

    header = codec.encode_json_segment({"alg": "HS256", "typ": "JWT"})
    prefix = header + b"." + codec.encode_json_segment({"exp": "soon"})
    token = codec.join(prefix, DEFAULT_REGISTRY.get("HS256").sign(SECRET, prefix))
    with pytest.raises(ClaimsDecodeError):
        _verifier(clock).verify(token)


def test_check_reports_reason_codes(clock) -> None:
    verifier = _verifier(clock)
    good = _issue(clock, {"sub": "u1"}, max_age=10)

    result = verifier.check(good)
    assert result.valid and result.reason == "ok"
    assert result.token.standard_claims.subject == "u1"

    clock.advance(11)
    expired = verifier.check(good)
    assert not expired.valid
    assert expired.reason == "token_expired"
    assert isinstance(expired.error, TokenExpiredError)

    assert verifier.check("a.b").reason == "malformed_token"
    assert verifier.check("a.b.c!").reason == "encoding_error"


def test_verified_token_decodes_into_records(clock) -> None:
    token = _issue(clock, {"sub": "u1", "scope": "read"})
    verified = _verifier(clock).verify(token)
    assert verified.decode(strict=True, required=["scope"]) == {"sub": "u1", "scope": "read"}


def test_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("JWTSEAL_LEEWAY_SECONDS", "30")
    monkeypatch.setenv("JWTSEAL_ALLOWED_ALGORITHMS", "ES256, EdDSA")
    monkeypatch.setenv("JWTSEAL_REJECT_FUTURE_IAT", "true")

    config = VerifierConfig.from_env()
    assert config.leeway == 30
    assert config.allowed_algorithms == frozenset({"ES256", "EdDSA"})
    assert config.reject_future_issued_at is True
    assert VerifierConfig.from_env(leeway=5).leeway == 5


def test_negative_leeway_is_rejected() -> None:
    with pytest.raises(ValueError):
        VerifierConfig(leeway=-1)


class _AsyncBlocklist:
    def __init__(self, blocked: set) -> None:
        self.blocked = blocked

    def identify(self, token) -> str:
        return token.compact.signature_segment.decode()

    async def is_blocked(self, token_id: str) -> bool:
        await asyncio.sleep(0)
        return token_id in self.blocked


def test_verify_async_awaits_blocklist(clock) -> None:
    token = _issue(clock, {"sub": "u1"})
    blocklist = _AsyncBlocklist(set())
    verifier = TokenVerifier(SECRET, config=VerifierConfig(clock=clock), blocklist=blocklist)

    async def run() -> None:
        assert (await verifier.verify_async(token)).standard_claims.subject == "u1"
        blocklist.blocked.add(token.rsplit(".", 1)[1])
        with pytest.raises(TokenBlockedError):
            await verifier.verify_async(token)

    asyncio.run(run())


def test_sync_verify_refuses_async_blocklist(clock) -> None:
    token = _issue(clock, {"sub": "u1"})
    verifier = TokenVerifier(SECRET, config=VerifierConfig(clock=clock), blocklist=_AsyncBlocklist(set()))
    with pytest.raises(TypeError):
        verifier.verify(token)


def test_non_finite_time_claim_is_a_decode_error(clock) -> None:
    prefix = codec.encode_json_segment({"alg": "HS256", "typ": "JWT"}) + b"." + codec.b64url_encode(b'{"exp":Infinity}')
    token = codec.join(prefix, DEFAULT_REGISTRY.get("HS256").sign(SECRET, prefix))

    with pytest.raises(ClaimsDecodeError):
        _verifier(clock).verify(token)
    assert _verifier(clock).check(token).reason == "claims_decode_error"


def test_non_finite_numbers_are_not_signed(clock) -> None:
    with pytest.raises(TokenEncodingError):
        _issue(clock, {"score": float("nan")})
    with pytest.raises(TokenEncodingError):
        _issue(clock, {"score": float("inf")})


def test_issued_claims_are_read_only(clock) -> None:
    issued = TokenIssuer("HS256", SECRET, clock=clock).issue({"sub": "u1"}, max_age=60)
    assert issued.claims["exp"] == clock() + 60
    with pytest.raises(TypeError):
        issued.claims["sub"] = "u2"
