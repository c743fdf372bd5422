import os
import tempfile
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pytest

# Uploaded files go to a throwaway directory; set before the app mounts /files
os.environ.setdefault("STORAGE_ROOT", tempfile.mkdtemp(prefix="libadmin-storage-"))
os.environ.pop("DEV_MODE", None)

from fastapi.testclient import TestClient

from libadmin.api.main import app
from libadmin.db import models
from libadmin.db.database import SessionLocal, engine
from libadmin.db.repositories import accounts as account_repo
from libadmin.db.repositories import admin_users as admin_repo
from libadmin.db.repositories import sessions as session_repo
from libadmin.services.storage_service import StorageService, get_storage_service
from libadmin.utils.feature_flags import refresh_feature_flag_cache
from libadmin.utils.role_permissions import get_role_permissions

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="session", autouse=True)
def _schema():
    models.Base.metadata.create_all(bind=engine)
    yield
    models.Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(models.Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(autouse=True)
def _runtime_env(monkeypatch):
    monkeypatch.delenv("DEV_MODE", raising=False)
    for var in (
        "FEATURE_AR_SCANNING_ENABLED",
        "FEATURE_BOOK_SEARCH_ENABLED",
        "FEATURE_CORRECTIONS_ENABLED",
        "FEATURE_ANALYTICS_ENABLED",
    ):
        monkeypatch.delenv(var, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def storage(tmp_path):
    service = StorageService(str(tmp_path), "/files")
    app.dependency_overrides[get_storage_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_storage_service, None)


@dataclass
class TestUser:
    uid: str
    email: str
    password: str
    token: Optional[str] = None
    claims: Dict = field(default_factory=dict)

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}


@pytest.fixture
def make_user(db_session):
    """Factory for accounts with optional admin claims and profile, plus a session token."""

    def _make(
        role: Optional[str] = "super_admin",
        *,
        email: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
        profile: bool = True,
        claims: Optional[Dict] = None,
        assigned_libraries: Optional[List[str]] = None,
        is_active: bool = True,
        permissions: Optional[Dict[str, bool]] = None,
        with_token: bool = True,
    ) -> TestUser:
        email = email or f"user_{uuid.uuid4().hex[:8]}@example.com"
        account = account_repo.create_account(db_session, email=email, password=password, display_name="Tester")
        if claims is None:
            claims = {"role": role, "isAdmin": True} if role else {}
        account_repo.set_custom_claims(db_session, account.uid, claims)
        if profile and role:
            admin_repo.upsert_admin_user(
                db_session,
                uid=account.uid,
                data={
                    "email": account.email,
                    "display_name": "Tester",
                    "role": role,
                    "permissions": permissions if permissions is not None else get_role_permissions(role),
                    "assigned_libraries": list(assigned_libraries or []),
                    "is_active": is_active,
                },
            )
        token = None
        if with_token:
            _session, token = session_repo.create_session(db_session, uid=account.uid, ttl_hours=1)
        return TestUser(uid=account.uid, email=account.email, password=password, token=token, claims=claims)

    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("super_admin")


@pytest.fixture
def admin(make_user):
    return make_user("admin")


@pytest.fixture
def library(client, super_admin):
    r = client.post(
        "/libraries/",
        json={"id": "lib_test", "name": "Bibliotheque Centrale", "city": "Alger", "address": "1 Rue Didouche"},
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def floor(client, super_admin, library):
    r = client.post(
        f"/libraries/{library['id']}/floors/",
        json={"id": "floor_0", "name": "Rez-de-chaussee", "floor_number": 0},
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def shelf(client, super_admin, library, floor):
    r = client.post(
        f"/libraries/{library['id']}/floors/{floor['id']}/shelves/",
        json={"id": "shelf_a1", "name": "A-1-1", "capacity": 10, "category": "Roman"},
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def book(client, super_admin):
    r = client.post(
        "/books/",
        json={"isbn": "9780000000001", "title": "L'Etranger", "author": "Albert Camus", "category": "Roman"},
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    return r.json()
