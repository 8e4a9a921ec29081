import pytest

from app.utils import settings
from app.utils.security import InvalidToken, TokenSigner, parse_retired_keys

OLD_SECRET = "old-secret-aaaaaaaaaaaaaaaaaaaaaaaaaaaa"
NEW_SECRET = "new-secret-bbbbbbbbbbbbbbbbbbbbbbbbbbbb"


def test_sign_and_verify_round_trip():
    signer = TokenSigner(secret=NEW_SECRET, key_id="k2")
    assert signer.verify(signer.sign(42)) == 42


def test_retired_key_still_verifies_after_rotation():
    old_token = TokenSigner(secret=OLD_SECRET, key_id="k1").sign(7)
    rotated = TokenSigner(secret=NEW_SECRET, key_id="k2", retired_keys={"k1": OLD_SECRET})

    assert rotated.verify(old_token) == 7


def test_dropped_key_no_longer_verifies():
    old_token = TokenSigner(secret=OLD_SECRET, key_id="k1").sign(7)
    rotated = TokenSigner(secret=NEW_SECRET, key_id="k2")

    with pytest.raises(InvalidToken):
        rotated.verify(old_token)


def test_new_tokens_use_active_key():
    rotated = TokenSigner(secret=NEW_SECRET, key_id="k2", retired_keys={"k1": OLD_SECRET})
    only_new = TokenSigner(secret=NEW_SECRET, key_id="k2")

    assert only_new.verify(rotated.sign(3)) == 3


def test_tampered_token_is_rejected():
    signer = TokenSigner(secret=NEW_SECRET, key_id="k2")
    header, payload, _ = signer.sign(2).split(".")
    _, _, signature = signer.sign(1).split(".")
    tampered = ".".join([header, payload, signature])

    with pytest.raises(InvalidToken):
        signer.verify(tampered)


def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        TokenSigner(secret="")


def test_from_settings_requires_secret(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", None)

    with pytest.raises(RuntimeError):
        TokenSigner.from_settings()


def test_from_settings_reads_retired_keys(monkeypatch):
    monkeypatch.setattr(settings, "JWT_SECRET_KEY", NEW_SECRET)
    monkeypatch.setattr(settings, "JWT_KEY_ID", "k2")
    monkeypatch.setattr(settings, "JWT_RETIRED_KEYS", f"k1:{OLD_SECRET}")
    old_token = TokenSigner(secret=OLD_SECRET, key_id="k1").sign(9)

    assert TokenSigner.from_settings().verify(old_token) == 9


def test_parse_retired_keys():
    assert parse_retired_keys("") == {}
    assert parse_retired_keys("a:one, b:two") == {"a": "one", "b": "two"}

    with pytest.raises(ValueError):
        parse_retired_keys("missing-separator")
