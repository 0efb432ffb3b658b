from datetime import timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app import models
from app.domain.users.repository import UserRepository
from app.domain.users.service import SYSTEM_ID, is_admin_by_name
from app.security_utils import (
    create_session_token,
    hash_password_bcrypt,
    normalize_bcrypt_hash,
    verify_password_bcrypt,
)

from .conftest import TEST_PASSWORD

# Written by Laravel Hash::make("password")
LARAVEL_HASH = "$2y$10$92IXUNpkjO0rOQ5byMi.Ye4oKoEa3Ro9llC/.og/at2.uheWG/igi"


@pytest.fixture()
def legacy_admin(db_session):
    user = models.Usuario(
        login="admin", senha=LARAVEL_HASH, nome="Fulano de Tal", status=models.STATUS_ACTIVE
    )
    db_session.add(user)
    db_session.commit()
    return user


class TestPasswordHashing:
    def test_new_hashes_use_php_prefix(self):
        hashed = hash_password_bcrypt("qualquer")
        assert hashed.startswith("$2y$10$")

    def test_verify_php_and_python_variants(self):
        hashed = hash_password_bcrypt("qualquer")
        assert verify_password_bcrypt("qualquer", hashed)
        assert verify_password_bcrypt("qualquer", normalize_bcrypt_hash(hashed))
        assert not verify_password_bcrypt("outra", hashed)

    def test_non_bcrypt_digest_is_rejected(self):
        assert not verify_password_bcrypt("qualquer", "5f4dcc3b5aa765d61d8327deb882cf99")
        assert not verify_password_bcrypt("qualquer", "")

    def test_php_digest_verifies(self):
        assert verify_password_bcrypt("password", LARAVEL_HASH)
        assert not verify_password_bcrypt("Password", LARAVEL_HASH)

    def test_2a_digest_verifies(self):
        digest = "$2a$" + LARAVEL_HASH[4:]
        assert verify_password_bcrypt("password", digest)
        assert not verify_password_bcrypt("senha", digest)

    def test_normalize_leaves_other_prefixes_alone(self):
        assert normalize_bcrypt_hash("$2a$10$abc") == "$2a$10$abc"
        assert normalize_bcrypt_hash("$2y$10$abc") == "$2b$10$abc"


class TestLogin:
    def test_login_success(self, client, usuario):
        response = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["user"] == {
            "login": "recepcao",
            "nome": "Maria Recepção",
            "email": "recepcao@clinica.com.br",
            "isAdmin": False,
            "hasSystemAccess": True,
            "userLevel": "Usuario",
        }

    def test_token_opens_session(self, client, usuario):
        login = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})
        token = login.json()["access_token"]

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["login"] == "recepcao"

    def test_wrong_password(self, client, usuario):
        response = client.post("/auth/login", json={"login": "recepcao", "senha": "errada"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Usuário ou senha inválidos"

    def test_unknown_user_gets_same_message(self, client, usuario):
        response = client.post("/auth/login", json={"login": "ninguem", "senha": TEST_PASSWORD})

        assert response.status_code == 401
        assert response.json()["detail"] == "Usuário ou senha inválidos"

    def test_inactive_user_cannot_login(self, client, db_session, usuario):
        usuario.status = "Inativo"
        db_session.commit()

        response = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})
        assert response.status_code == 401

    def test_missing_fields(self, client):
        response = client.post("/auth/login", json={"login": "recepcao"})
        assert response.status_code == 422

    def test_admin_group_member(self, client, db_session, usuario):
        db_session.add(models.UsuarioGrupo(usuario_login="recepcao", grupo_id=2))
        db_session.commit()

        response = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})

        user = response.json()["user"]
        assert user["isAdmin"] is True
        assert user["userLevel"] == "Administrador"

    def test_non_admin_group_member(self, client, db_session, usuario):
        db_session.add(models.UsuarioGrupo(usuario_login="recepcao", grupo_id=9))
        db_session.commit()

        response = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})
        assert response.json()["user"]["isAdmin"] is False

    def test_login_with_php_digest(self, client, legacy_admin):
        response = client.post("/auth/login", json={"login": "admin", "senha": "password"})

        assert response.status_code == 200
        assert response.json()["user"]["login"] == "admin"

    def test_admin_by_name_without_group_table(self, client, db_session, usuario, legacy_admin):
        models.UsuarioGrupo.__table__.drop(bind=db_session.get_bind())

        admin = client.post("/auth/login", json={"login": "admin", "senha": "password"})
        regular = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})

        assert admin.json()["user"]["isAdmin"] is True
        assert admin.json()["user"]["userLevel"] == "Administrador"
        assert regular.json()["user"]["isAdmin"] is False

    def test_admin_by_name_when_group_lookup_fails(self, client, db_session, legacy_admin, monkeypatch):
        # Group 9 is not an admin group; the name check decides once the lookup fails
        db_session.add(models.UsuarioGrupo(usuario_login="admin", grupo_id=9))
        db_session.commit()

        def fail(db, login):
            raise SQLAlchemyError("Table 'usuariogrupo' is marked as crashed")

        monkeypatch.setattr(UserRepository, "get_group_ids", staticmethod(fail))

        response = client.post("/auth/login", json={"login": "admin", "senha": "password"})

        assert response.status_code == 200
        assert response.json()["user"]["isAdmin"] is True

    def test_system_admin_name_is_always_admin(self, client, db_session, usuario):
        usuario.nome = "Administrador do Sistema"
        db_session.commit()

        response = client.post("/auth/login", json={"login": "recepcao", "senha": TEST_PASSWORD})
        assert response.json()["user"]["isAdmin"] is True


class TestSession:
    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer nao-e-um-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, usuario):
        token = create_session_token(usuario.login, expires_delta=timedelta(minutes=-5))
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_inactive_user(self, client, db_session, usuario, auth_headers):
        usuario.status = "Inativo"
        db_session.commit()

        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 401

    def test_me_without_system_access(self, client, usuario, auth_headers):
        body = client.get("/auth/me", headers=auth_headers).json()

        assert body["systemAccess"] is False
        assert body["isSystemAdmin"] is False

    def test_me_with_system_admin_row(self, client, db_session, usuario, auth_headers):
        db_session.add(
            models.UsuarioSistema(usuarios_login="recepcao", sistemas_id=SYSTEM_ID, nivel="Administrador")
        )
        db_session.commit()

        body = client.get("/auth/me", headers=auth_headers).json()
        assert body["systemAccess"] is True
        assert body["isSystemAdmin"] is True

    def test_me_with_access_on_other_system(self, client, db_session, usuario, auth_headers):
        db_session.add(models.UsuarioSistema(usuarios_login="recepcao", sistemas_id=1, nivel="Administrador"))
        db_session.commit()

        body = client.get("/auth/me", headers=auth_headers).json()
        assert body["systemAccess"] is False

    def test_domain_routes_require_session(self, client):
        for path in ("/clientes", "/expedientes", "/usuarios", "/lancamentos", "/agendas/1"):
            assert client.get(path).status_code == 401, path

    def test_public_routes(self, client):
        assert client.get("/").status_code == 200
        assert client.get("/health").json() == {"status": "healthy"}


def test_admin_name_fallback():
    assert is_admin_by_name("admin", "Fulano")
    assert is_admin_by_name("joao", "João Administrador")
    assert is_admin_by_name("joao", "Administrador do Sistema")
    assert not is_admin_by_name("joao", "João Silva")
