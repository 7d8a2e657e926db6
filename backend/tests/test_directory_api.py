"""Group and activity endpoints against a throwaway SQLite database."""
import json
from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.pool import NullPool

from commons_youth.api.v1 import groups as groups_api
from commons_youth.auth.jwt import get_current_user, get_optional_user
from commons_youth.config import get_settings
from commons_youth.database import Base, get_db
from commons_youth.main import app
from commons_youth.models import Activity, CommunityProject, Group, User
from commons_youth.services.thai_locations import ThaiLocationCache, get_location_cache


@compiles(JSONB, "sqlite")
def _jsonb_as_sqlite_json(type_, compiler, **kw):
    return "JSON"


class MemoryStorage:
    def __init__(self):
        self.objects = {}

    def upload_bytes(self, data, object_name, content_type=None):
        self.objects[object_name] = (data, content_type)

    def get_public_url(self, object_name):
        return f"/uploads/{object_name}"


def make_user(role="user"):
    return SimpleNamespace(id=uuid4(), email=f"{uuid4().hex[:8]}@example.org", role=role, is_active=True)


@pytest.fixture
def acting():
    """Who the next request runs as; ``None`` is an anonymous visitor."""
    return {"user": None}


@pytest.fixture
def api(tmp_path, location_data, acting):
    db_path = tmp_path / "directory.db"
    tables = [model.__table__ for model in (User, Group, Activity, CommunityProject)]
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine, tables=tables)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    locations_path = tmp_path / "thai.json"
    locations_path.write_text(json.dumps(location_data, ensure_ascii=False), encoding="utf-8")
    locations = ThaiLocationCache(str(locations_path))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: acting["user"]
    app.dependency_overrides[get_optional_user] = lambda: acting["user"]
    app.dependency_overrides[get_location_cache] = lambda: locations
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner(acting):
    user = make_user()
    acting["user"] = user
    return user


def group_payload(**overrides):
    payload = {
        "name": "Young Mappers",
        "province": "เชียงใหม่",
        "amphoe": "เมืองเชียงใหม่",
        "tambon": "ศรีภูมิ",
        "issues": ["การพัฒนาเมือง"],
        "description": "Mapping public space with students",
        "contact": "mappers@example.org",
    }
    payload.update(overrides)
    return payload


def create_group(api, **overrides):
    response = api.post("/api/v1/groups", json=group_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_create_resolves_missing_coordinates(api, owner):
    group = create_group(api)
    assert group["latitude"] == pytest.approx(18.79)
    assert group["longitude"] == pytest.approx(98.98)
    assert group["owner_id"] == str(owner.id)


def test_create_keeps_given_coordinates(api, owner):
    group = create_group(api, latitude=19.5, longitude=99.5)
    assert (group["latitude"], group["longitude"]) == (19.5, 99.5)


def test_moving_a_group_re_resolves_coordinates(api, owner):
    group = create_group(api)

    response = api.patch(
        f"/api/v1/groups/{group['id']}",
        json={"province": "น่าน", "amphoe": None, "tambon": None},
    )
    assert response.status_code == 200
    moved = response.json()
    assert moved["province"] == "น่าน"
    # mean of the province's tambons
    assert moved["latitude"] == pytest.approx(18.76)
    assert moved["longitude"] == pytest.approx(100.76)


def test_explicit_coordinates_win_over_re_resolution(api, owner):
    group = create_group(api)
    response = api.patch(
        f"/api/v1/groups/{group['id']}",
        json={"province": "น่าน", "latitude": 18.0, "longitude": 100.0},
    )
    assert (response.json()["latitude"], response.json()["longitude"]) == (18.0, 100.0)


def test_patch_ignores_null_required_fields(api, owner):
    group = create_group(api)

    response = api.patch(
        f"/api/v1/groups/{group['id']}",
        json={"name": None, "description": None, "image_url": None},
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Young Mappers"
    assert updated["description"] == "Mapping public space with students"
    assert (updated["latitude"], updated["longitude"]) == (group["latitude"], group["longitude"])


def test_only_owner_or_admin_may_edit(api, owner, acting):
    group = create_group(api)

    acting["user"] = make_user()
    response = api.patch(f"/api/v1/groups/{group['id']}", json={"name": "Taken over"})
    assert response.status_code == 403

    acting["user"] = make_user(role="admin")
    response = api.patch(f"/api/v1/groups/{group['id']}", json={"name": "Renamed"})
    assert response.status_code == 200
    assert response.json()["name"] == "Renamed"


def test_hidden_group_is_404_for_strangers(api, owner, acting):
    group = create_group(api)
    url = f"/api/v1/groups/{group['id']}"

    acting["user"] = make_user(role="admin")
    response = api.put(f"{url}/visibility", json={"is_hidden": True})
    assert response.json()["is_hidden"] is True

    acting["user"] = make_user()
    assert api.get(url).status_code == 404
    acting["user"] = None
    assert api.get(url).status_code == 404
    assert api.get("/api/v1/groups").json()["total"] == 0

    acting["user"] = owner
    assert api.get(url).status_code == 200


def test_visibility_requires_admin(api, owner):
    group = create_group(api)
    response = api.put(f"/api/v1/groups/{group['id']}/visibility", json={"is_hidden": True})
    assert response.status_code == 403


def test_list_filters_by_issue_and_search(api, owner):
    create_group(api)
    create_group(api, name="KK Readers", province="ขอนแก่น", amphoe=None, tambon=None,
                 issues=["ปฏิรูปการศึกษา"])

    names = [g["name"] for g in api.get("/api/v1/groups", params={"issue": "ปฏิรูปการศึกษา"}).json()["items"]]
    assert names == ["KK Readers"]
    names = [g["name"] for g in api.get("/api/v1/groups", params={"q": "mappers"}).json()["items"]]
    assert names == ["Young Mappers"]
    assert api.get("/api/v1/groups", params={"issue": "All"}).json()["total"] == 2


def test_cover_rejects_non_images(api, owner):
    group = create_group(api)
    response = api.post(
        f"/api/v1/groups/{group['id']}/cover",
        files={"file": ("notes.txt", b"hello", "text/plain")},
    )
    assert response.status_code == 415


def test_cover_rejects_oversized_images(api, owner):
    group = create_group(api)
    too_big = b"\0" * (get_settings().MAX_COVER_IMAGE_MB * 1024 * 1024 + 1)
    response = api.post(
        f"/api/v1/groups/{group['id']}/cover",
        files={"file": ("cover.png", too_big, "image/png")},
    )
    assert response.status_code == 413


def test_cover_upload_stores_sanitized_name(api, owner, monkeypatch):
    storage = MemoryStorage()
    monkeypatch.setattr(groups_api, "get_storage", lambda: storage)
    group = create_group(api)

    response = api.post(
        f"/api/v1/groups/{group['id']}/cover",
        files={"file": ("../my cover!.PNG", b"\x89PNG", "image/png")},
    )
    assert response.status_code == 200

    [(object_name, (data, content_type))] = storage.objects.items()
    assert object_name.startswith(f"covers/groups/{group['id']}/")
    assert object_name.endswith("_my cover_.PNG")
    assert data == b"\x89PNG"
    assert content_type == "image/png"
    assert response.json()["image_url"] == f"/uploads/{object_name}"


def add_activity(api, group_id, title, days_from_now):
    date = datetime.utcnow() + timedelta(days=days_from_now)
    response = api.post(
        "/api/v1/activities",
        json={"group_id": group_id, "title": title, "date": date.isoformat(), "location": "Nimman"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_activity_modes_split_and_order_by_date(api, owner):
    group = create_group(api)
    add_activity(api, group["id"], "next month", 30)
    add_activity(api, group["id"], "tomorrow", 1)
    add_activity(api, group["id"], "last week", -7)
    add_activity(api, group["id"], "yesterday", -1)

    upcoming = api.get("/api/v1/activities", params={"mode": "upcoming"}).json()
    assert [a["title"] for a in upcoming["items"]] == ["tomorrow", "next month"]
    assert upcoming["items"][0]["group_name"] == "Young Mappers"

    past = api.get("/api/v1/activities", params={"mode": "past"}).json()
    assert [a["title"] for a in past["items"]] == ["yesterday", "last week"]

    assert api.get("/api/v1/activities", params={"mode": "someday"}).status_code == 422


def test_activity_needs_a_group_the_author_manages(api, owner, acting):
    group = create_group(api)

    acting["user"] = make_user()
    response = api.post(
        "/api/v1/activities",
        json={"group_id": group["id"], "title": "Hijack", "date": "2030-01-01T10:00:00",
              "location": "Nimman"},
    )
    assert response.status_code == 403

    response = api.post(
        "/api/v1/activities",
        json={"group_id": str(uuid4()), "title": "Orphan", "date": "2030-01-01T10:00:00",
              "location": "Nimman"},
    )
    assert response.status_code == 404
