import asyncio

import pytest

from app.services import auth
from app.services.auth import (
    PasswordHashingError,
    hash_password,
    hash_password_async,
    is_password_hash,
    verify_password,
    verify_password_async,
)


def test_hash_password_uses_cost_factor_ten() -> None:
    hashed = hash_password("secret1")

    assert hashed != "secret1"
    assert hashed.startswith("$2b$10$")
    assert verify_password("secret1", hashed)


def test_hash_password_salts_every_call() -> None:
    first = hash_password("secret1")
    second = hash_password("secret1")

    assert first != second
    assert verify_password("secret1", first)
    assert verify_password("secret1", second)


def test_verify_password_rejects_other_password() -> None:
    assert not verify_password("secret2", hash_password("secret1"))


@pytest.mark.parametrize("stored", [None, "", "secret1", "$2b$10$not-a-real-hash"])
def test_verify_password_fails_closed_on_bad_hash(stored) -> None:
    assert verify_password("secret1", stored) is False


def test_hash_password_wraps_backend_errors(monkeypatch) -> None:
    def boom(_secret):
        raise ValueError("rng exhausted")

    monkeypatch.setattr(auth.pwd_context, "hash", boom)

    with pytest.raises(PasswordHashingError) as excinfo:
        hash_password("secret1")
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_is_password_hash() -> None:
    assert is_password_hash(hash_password("secret1"))
    assert not is_password_hash("secret1")
    assert not is_password_hash(None)


@pytest.mark.parametrize("value", ["$2b$secret1", "$2b$10$", "$2b$10$" + "a" * 22, "$2b$10$" + "a" * 52 + "!"])
def test_is_password_hash_requires_full_bcrypt_shape(value) -> None:
    assert not is_password_hash(value)


def test_async_helpers_run_off_the_event_loop() -> None:
    async def scenario():
        hashed = await hash_password_async("secret1")
        return hashed, await verify_password_async("secret1", hashed), await verify_password_async("nope!!", hashed)

    hashed, ok, wrong = asyncio.run(scenario())

    assert hashed.startswith("$2b$10$")
    assert ok is True
    assert wrong is False
