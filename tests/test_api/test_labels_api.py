"""
Tests for label stats API endpoints
"""
import pytest
from datetime import datetime, timezone
from fastapi.testclient import TestClient

from labeltime.main import app
from labeltime.api.deps import get_db, get_current_user, get_clock
from labeltime.application.clock import ClockProvider
from labeltime.domain.time_bucket import BUCKET_DAY, BUCKET_WEEK, BUCKET_MONTH
from labeltime.infrastructure.db.models import LabelTimeBucket


FIXED_NOW = datetime(2025, 6, 11, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def client(db_session, sample_user):
    """Test client with DB, user and clock overridden"""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_current_user] = lambda: sample_user
    app.dependency_overrides[get_clock] = lambda: ClockProvider(lambda: FIXED_NOW)
    yield TestClient(app)
    app.dependency_overrides.clear()


def _row(db, label_id, bucket_type, year, value, minutes):
    db.add(LabelTimeBucket(
        user_id=1, label_id=label_id, label_name="Work",
        bucket_type=bucket_type, bucket_year=year, bucket_value=value,
        duration_minutes=minutes,
    ))
    db.flush()


def test_health():
    assert TestClient(app).get("/health").text == "ok"


def test_stats_for_label_group(client, db_session):
    _row(db_session, 10, BUCKET_DAY, 2025, 20250611, 30)
    _row(db_session, 20, BUCKET_DAY, 2025, 20250611, 20)

    response = client.get("/api/v1/labels/stats", params=[("label_ids", 10), ("label_ids", 20)])

    assert response.status_code == 200
    data = response.json()
    assert data["today"] == 50
    assert data["all_time"] == 50
    assert data["last_month"] == 0


def test_stats_without_labels_is_all_zero(client):
    response = client.get("/api/v1/labels/stats")

    assert response.status_code == 200
    assert set(response.json().values()) == {0}


def test_month_stats(client, db_session, make_label):
    make_label(10, "Work")
    _row(db_session, 10, BUCKET_MONTH, 2025, 5, 600)

    response = client.get("/api/v1/labels/10/months/2025/5")

    assert response.status_code == 200
    assert response.json() == {"label_id": 10, "label_name": "Work", "year": 2025, "month": 5, "total_minutes": 600}


def test_month_stats_invalid_month(client):
    response = client.get("/api/v1/labels/10/months/2025/13")
    assert response.status_code == 422


def test_month_stats_unknown_label_is_404(client):
    response = client.get("/api/v1/labels/999/months/2025/5")
    assert response.status_code == 404


def test_buckets_newest_first(client, db_session):
    _row(db_session, 10, BUCKET_DAY, 2025, 20250610, 50)
    _row(db_session, 10, BUCKET_DAY, 2025, 20250611, 30)
    _row(db_session, 10, BUCKET_WEEK, 2025, 24, 80)
    _row(db_session, 20, BUCKET_DAY, 2025, 20250611, 99)

    response = client.get("/api/v1/labels/10/buckets")

    assert response.status_code == 200
    assert [(b["bucket_type"], b["bucket_value"]) for b in response.json()] == [
        (BUCKET_DAY, 20250611),
        (BUCKET_DAY, 20250610),
        (BUCKET_WEEK, 24),
    ]


def test_buckets_filtered_by_type(client, db_session):
    _row(db_session, 10, BUCKET_DAY, 2025, 20250611, 30)
    _row(db_session, 10, BUCKET_WEEK, 2025, 24, 80)

    response = client.get("/api/v1/labels/10/buckets", params={"bucket_type": BUCKET_WEEK})

    assert response.status_code == 200
    assert response.json() == [{
        "label_name": "Work", "bucket_type": BUCKET_WEEK,
        "bucket_year": 2025, "bucket_value": 24, "duration_minutes": 80,
    }]


def test_buckets_unknown_type_is_422(client):
    response = client.get("/api/v1/labels/10/buckets", params={"bucket_type": "YEAR"})
    assert response.status_code == 422


def test_stats_requires_login(db_session):
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        response = TestClient(app).get("/api/v1/labels/stats")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 401
