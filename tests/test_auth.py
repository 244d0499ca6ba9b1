# -*- coding: utf-8 -*-
"""
Tests de la frontera de login (UserService).
"""
import pytest

from kiosquito.errors import ValidationError


@pytest.fixture
def users(container):
    return container.user_service


def test_authenticate_admin(users):
    user = users.authenticate("admin", "admin123")
    assert user is not None
    assert user.username == "admin"
    assert "password_hash" not in user.to_dict()


@pytest.mark.parametrize("username, password", [
    ("admin", "incorrecta"),
    ("nadie", "admin123"),
    ("", "admin123"),
    ("admin", ""),
    (None, None),
])
def test_authenticate_rejects(users, username, password):
    assert users.authenticate(username, password) is None
    assert users.verify_password(username, password) is False


def test_create_user_hashes_password(users, container):
    users.create_user("cajero", "1234")
    stored = container.user_repo.get_user("cajero").password_hash

    assert users.is_password_hashed(stored)
    assert users.authenticate("cajero", "1234") is not None
    assert [u.username for u in users.list_users()] == ["admin", "cajero"]


@pytest.mark.parametrize("username, password", [
    ("admin", "otra"),
    ("", "1234"),
    ("__interno", "1234"),
    ("cajero", ""),
])
def test_create_user_rejects(users, username, password):
    with pytest.raises(ValidationError):
        users.create_user(username, password)


def test_legacy_plaintext_login_still_works(users, container):
    # Fila heredada sin hash (antes de la migración)
    container.user_repo.create_user("viejo", "clave")
    assert not users.is_password_hashed("clave")
    assert users.authenticate("viejo", "clave") is not None

    assert users.migrate_passwords_to_hash() == 1
    assert users.authenticate("viejo", "clave") is not None
    assert users.authenticate("viejo", "otra") is None
