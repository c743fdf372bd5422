from libadmin.utils import token_crypto


def test_generate_and_parse():
    tid, secret, full = token_crypto.generate_token()
    assert full.startswith(token_crypto.TOKEN_PREFIX)
    assert "_" not in tid
    parsed = token_crypto.parse_token(full)
    assert parsed is not None
    assert parsed.token_id == tid
    assert parsed.secret == secret


def test_parse_rejects_malformed_tokens():
    assert token_crypto.parse_token("") is None
    assert token_crypto.parse_token("Bearer abc") is None
    assert token_crypto.parse_token("la_sess_") is None
    assert token_crypto.parse_token("la_sess_abc") is None
    assert token_crypto.parse_token("la_sess__secret") is None


def test_secret_with_underscore_survives_parse():
    parsed = token_crypto.parse_token(token_crypto.build_token_string("abc123", "s_e_c"))
    assert parsed.token_id == "abc123"
    assert parsed.secret == "s_e_c"


def test_hash_and_verify():
    encoded = token_crypto.hash_secret("s3cr3t-value")
    assert encoded.startswith("$argon2id$")
    assert token_crypto.verify_secret("s3cr3t-value", encoded)
    assert not token_crypto.verify_secret("wrong", encoded)
    assert not token_crypto.verify_secret("s3cr3t-value", "not-a-hash")
    assert not token_crypto.verify_secret("", encoded)
