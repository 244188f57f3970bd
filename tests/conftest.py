from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import count

import asyncpg
import pytest
from fastapi.testclient import TestClient

from admin import repository as admin_repository
from auth import google
from auth import repository as auth_repository
from auth import security
from core.config import Settings
from main import create_app
from sponsors import repository as sponsors_repository

ADMIN_EMAIL = "admin@example.com"

GOOGLE_ACCOUNTS = {
    "alice-token": {
        "sub": "google-alice",
        "email": "alice@example.com",
        "name": "Alice",
        "picture": "https://example.com/alice.png",
    },
    "admin-token": {
        "sub": "google-admin",
        "email": ADMIN_EMAIL,
        "name": "Ada Admin",
        "picture": None,
    },
    "unverified-admin-token": {
        "sub": "google-mallory",
        "email": ADMIN_EMAIL,
        "email_verified": False,
        "name": "Mallory",
        "picture": None,
    },
    "alice-second-account-token": {
        "sub": "google-alice-2",
        "email": "alice@example.com",
        "name": "Alice Again",
        "picture": None,
    },
}


class UntouchableDatabase:
    """Fails the test if anything reaches the database."""

    def __getattr__(self, name):
        raise AssertionError(f"database was used: {name}")


class RecordingDatabase:
    """Records every statement; `fetch_*` answer from queued results."""

    def __init__(self, *results) -> None:
        self.statements: list[str] = []
        self.calls: list[tuple[str, tuple]] = []
        self._results = list(results)

    def _record(self, sql: str, args: tuple):
        self.statements.append(sql)
        self.calls.append((sql, args))
        return self._results.pop(0) if self._results else None

    async def execute(self, sql: str, *args) -> None:
        self._record(sql, args)

    async def fetch_one(self, sql: str, *args):
        return self._record(sql, args)

    async def fetch_all(self, sql: str, *args):
        return self._record(sql, args) or []


class FakeStore:
    """In-memory stand-in for the sponsors / family_members tables."""

    def __init__(self) -> None:
        self._ids = count(1)
        self._member_ids = count(1)
        self.sponsors: dict[int, dict] = {}
        self.family_members: dict[int, dict] = {}
        self.upserts = 0

    def _by_google_id(self, google_id: str) -> dict | None:
        for row in self.sponsors.values():
            if row["google_id"] == google_id:
                return row
        return None

    async def link_sponsor_by_email(self, db, *, google_id, name, email, picture, is_admin):
        for row in self.sponsors.values():
            if row["email"] == email and row["google_id"] is None:
                row.update(google_id=google_id, name=name, picture=picture, is_admin=is_admin)
                return row["id"]
        return None

    async def upsert_google_sponsor(self, db, *, google_id, name, email, picture, is_admin):
        self.upserts += 1
        existing = self._by_google_id(google_id)
        if existing is not None:
            existing.update(name=name, picture=picture, is_admin=is_admin)
            return {"id": existing["id"], "inserted": False}
        if any(row["email"] == email for row in self.sponsors.values()):
            raise asyncpg.UniqueViolationError("duplicate key value violates \"sponsors_email_key\"")
        sponsor_id = next(self._ids)
        self.sponsors[sponsor_id] = {
            "id": sponsor_id,
            "google_id": google_id,
            "name": name,
            "email": email,
            "picture": picture,
            "description": None,
            "is_admin": is_admin,
            "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        }
        return {"id": sponsor_id, "inserted": True}

    async def get_sponsor_id_by_google_id(self, db, google_id):
        row = self._by_google_id(google_id)
        return row["id"] if row is not None else None

    async def insert_sponsor(self, db, *, name, email, description):
        sponsor_id = next(self._ids)
        self.sponsors[sponsor_id] = {
            "id": sponsor_id,
            "google_id": None,
            "name": name,
            "email": email,
            "picture": None,
            "description": description,
            "is_admin": False,
            "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
        }
        return sponsor_id

    async def insert_family_member(self, db, *, sponsor_id, name, email, date_of_birth):
        assert isinstance(date_of_birth, date)
        member_id = next(self._member_ids)
        self.family_members[member_id] = {
            "id": member_id,
            "sponsor_id": sponsor_id,
            "name": name,
            "email": email,
            "date_of_birth": date_of_birth,
        }
        return member_id

    async def list_sponsors(self, db):
        rows = []
        for sponsor in self.sponsors.values():
            names = [m["name"] for m in self.family_members.values() if m["sponsor_id"] == sponsor["id"]]
            rows.append(
                {
                    **sponsor,
                    "family_member_count": len(names),
                    "family_member_names": ", ".join(names) or None,
                }
            )
        return rows

    async def list_family_members(self, db):
        rows = []
        for member in self.family_members.values():
            sponsor = self.sponsors[member["sponsor_id"]]
            rows.append(
                {
                    **member,
                    "sponsor_name": sponsor["name"],
                    "sponsor_email": sponsor["email"],
                    "age": (date(2026, 10, 19) - member["date_of_birth"]).days // 365,
                }
            )
        return rows

    async def search(self, db, query, *, limit=50):
        q = query.lower()
        rows = [
            {"type": "sponsor", "id": s["id"], "name": s["name"], "email": s["email"]}
            for s in self.sponsors.values()
            if q in (s["name"] or "").lower() or q in (s["email"] or "").lower()
        ]
        rows += [
            {"type": "family_member", "id": m["id"], "name": m["name"], "email": m["email"]}
            for m in self.family_members.values()
            if q in (m["name"] or "").lower() or q in (m["email"] or "").lower()
        ]
        return rows[:limit]


def fake_google_verify(token: str, client_id: str) -> dict:
    if client_id != "test-client-id":
        raise ValueError("Token has wrong audience")
    if token not in GOOGLE_ACCOUNTS:
        raise ValueError("Could not verify token signature.")
    return dict(GOOGLE_ACCOUNTS[token])


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="development",
        jwt_secret="test-secret",
        google_client_id="test-client-id",
        admin_emails=frozenset({ADMIN_EMAIL}),
    )


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    store = FakeStore()
    monkeypatch.setattr(auth_repository, "link_sponsor_by_email", store.link_sponsor_by_email)
    monkeypatch.setattr(auth_repository, "upsert_google_sponsor", store.upsert_google_sponsor)
    monkeypatch.setattr(auth_repository, "get_sponsor_id_by_google_id", store.get_sponsor_id_by_google_id)
    monkeypatch.setattr(sponsors_repository, "insert_sponsor", store.insert_sponsor)
    monkeypatch.setattr(sponsors_repository, "insert_family_member", store.insert_family_member)
    monkeypatch.setattr(admin_repository, "list_sponsors", store.list_sponsors)
    monkeypatch.setattr(admin_repository, "list_family_members", store.list_family_members)
    monkeypatch.setattr(admin_repository, "search", store.search)
    monkeypatch.setattr(google, "_verify", fake_google_verify)
    return store


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.state.db = UntouchableDatabase()
    return app


@pytest.fixture
def client(app) -> TestClient:
    # No `with`: the lifespan (real pool) is not started.
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def make_token(settings):
    def _make(*, sponsor_id: int = 1, is_admin: bool = False, email: str = "alice@example.com") -> str:
        return security.build_session_token(
            google_id=f"google-{sponsor_id}",
            email=email,
            name="Test Sponsor",
            sponsor_id=sponsor_id,
            is_admin=is_admin,
            settings=settings,
        )

    return _make


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
