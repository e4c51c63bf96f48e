"""Declaration ledger test suite — one submission per staff per day.

Tests exercise both the service layer (direct DB) and the HTTP API (via router).
"""

from __future__ import annotations

import uuid
from datetime import date, time
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_ledger.common.constants import DeclarationStatus
from attendance_ledger.common.exceptions import (
    DuplicateSubmission,
    NotFoundException,
    StorageFailure,
    ValidationException,
)
from attendance_ledger.common.timeutils import local_today
from attendance_ledger.declarations.models import Declaration
from attendance_ledger.declarations.service import DeclarationLedger
from tests.conftest import OFFICE

# ═════════════════════════════════════════════════════════════════════
# 1. SUBMIT: Service Layer
# ═════════════════════════════════════════════════════════════════════


async def test_submit_creates_declaration(db, test_staff):
    declaration = await DeclarationLedger.submit(
        db,
        test_staff["id"],
        DeclarationStatus.present,
        day=date(2024, 3, 4),
        time_of_day=time(6, 45, 10),
    )

    assert declaration.id is not None
    assert declaration.staff_id == test_staff["id"]
    assert declaration.status == DeclarationStatus.present
    assert declaration.date == date(2024, 3, 4)
    assert declaration.time_of_day == time(6, 45, 10)


async def test_submit_defaults_to_local_today(db, test_staff):
    declaration = await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.sick)

    assert declaration.date == local_today()
    assert declaration.time_of_day.microsecond == 0


@pytest.mark.parametrize(
    "first, second",
    [
        (DeclarationStatus.present, DeclarationStatus.present),
        (DeclarationStatus.present, DeclarationStatus.sick),
        (DeclarationStatus.leave, DeclarationStatus.present),
    ],
)
async def test_second_submit_same_day_is_duplicate(db, test_staff, first, second):
    """A second submission fails regardless of differing status / time."""
    day = date(2024, 3, 4)
    await DeclarationLedger.submit(db, test_staff["id"], first, day=day, time_of_day=time(7, 0))

    with pytest.raises(DuplicateSubmission) as exc_info:
        await DeclarationLedger.submit(
            db, test_staff["id"], second, day=day, time_of_day=time(13, 30),
        )

    assert exc_info.value.status_code == 409
    assert exc_info.value.reason == "duplicate-submission"
    count = (await db.execute(select(func.count()).select_from(Declaration))).scalar_one()
    assert count == 1


async def test_same_day_different_staff_allowed(db, test_staff, other_staff):
    day = date(2024, 3, 4)
    await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.present, day=day)
    await DeclarationLedger.submit(db, other_staff["id"], DeclarationStatus.present, day=day)

    declarations = await DeclarationLedger.query(db)
    assert len(declarations) == 2


async def test_next_day_allowed(db, test_staff):
    await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.present, day=date(2024, 3, 4))
    await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.present, day=date(2024, 3, 5))

    assert len(await DeclarationLedger.query(db, staff_id=test_staff["id"])) == 2


async def test_concurrent_submit_caught_by_unique_constraint(db, test_staff):
    """If the lookup misses a racing insert, the constraint still rejects it."""
    day = date(2024, 3, 4)
    winner = await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.present, day=day)
    await db.commit()

    missed_then_found = AsyncMock(side_effect=[None, winner])
    with patch.object(DeclarationLedger, "_find_existing", new=missed_then_found):
        with pytest.raises(DuplicateSubmission):
            await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.sick, day=day)

    rows = (await db.execute(select(Declaration))).scalars().all()
    assert len(rows) == 1
    assert rows[0].status == DeclarationStatus.present


async def test_other_integrity_error_is_storage_failure(db, test_staff):
    """A constraint failure with no matching row is not a duplicate."""
    await db.commit()
    fk_error = IntegrityError("INSERT INTO declarations", {}, Exception("FOREIGN KEY constraint failed"))

    with patch.object(DeclarationLedger, "_find_existing", new=AsyncMock(return_value=None)):
        with patch.object(AsyncSession, "flush", new=AsyncMock(side_effect=fk_error)):
            with pytest.raises(StorageFailure) as exc_info:
                await DeclarationLedger.submit(
                    db, test_staff["id"], DeclarationStatus.leave, day=date(2024, 3, 4),
                )

    assert exc_info.value.status_code == 503
    assert isinstance(exc_info.value.__cause__, IntegrityError)


async def test_submit_unknown_staff_raises_not_found(db):
    with pytest.raises(NotFoundException):
        await DeclarationLedger.submit(db, uuid.uuid4(), DeclarationStatus.present)


# ═════════════════════════════════════════════════════════════════════
# 2. QUERY
# ═════════════════════════════════════════════════════════════════════


async def test_query_filters_by_staff_and_range(db, test_staff, other_staff):
    for day in (date(2024, 2, 28), date(2024, 3, 1), date(2024, 3, 15)):
        await DeclarationLedger.submit(db, test_staff["id"], DeclarationStatus.present, day=day)
    await DeclarationLedger.submit(db, other_staff["id"], DeclarationStatus.leave, day=date(2024, 3, 1))

    result = await DeclarationLedger.query(
        db,
        staff_id=test_staff["id"],
        from_date=date(2024, 3, 1),
        to_date=date(2024, 3, 31),
    )

    assert {d.date for d in result} == {date(2024, 3, 1), date(2024, 3, 15)}
    assert all(d.staff_id == test_staff["id"] for d in result)


async def test_query_rejects_inverted_range(db):
    with pytest.raises(ValidationException):
        await DeclarationLedger.query(db, from_date=date(2024, 3, 2), to_date=date(2024, 3, 1))


# ═════════════════════════════════════════════════════════════════════
# 3. HTTP API
# ═════════════════════════════════════════════════════════════════════


async def test_api_submit_present_inside_geofence(client, db, test_staff):
    await db.commit()

    resp = await client.post(
        "/api/v1/declarations",
        json={
            "staff_id": str(test_staff["id"]),
            "status": "Present",
            "date": "2024-03-04",
            "time_of_day": "06:58:00",
            "location": OFFICE,
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "Present"
    assert body["date"] == "2024-03-04"
    assert body["time_of_day"] == "06:58:00"


async def test_api_duplicate_returns_conflict(client, db, test_staff):
    await db.commit()
    payload = {"staff_id": str(test_staff["id"]), "status": "Sick", "date": "2024-03-04"}

    first = await client.post("/api/v1/declarations", json=payload)
    second = await client.post("/api/v1/declarations", json={**payload, "status": "Leave"})

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.headers["content-type"].startswith("application/problem+json")
    assert second.json()["reason"] == "duplicate-submission"


async def test_api_present_outside_geofence_denied_without_write(client, db, test_staff):
    await db.commit()

    resp = await client.post(
        "/api/v1/declarations",
        json={
            "staff_id": str(test_staff["id"]),
            "status": "Present",
            "location": {"latitude": OFFICE["latitude"] + 0.01, "longitude": OFFICE["longitude"]},
        },
    )

    assert resp.status_code == 403
    assert resp.json()["reason"] == "outside-geofence"
    listed = await client.get("/api/v1/declarations", params={"staff_id": str(test_staff["id"])})
    assert listed.json() == []


async def test_api_present_without_location_denied(client, db, test_staff):
    await db.commit()

    resp = await client.post(
        "/api/v1/declarations",
        json={"staff_id": str(test_staff["id"]), "status": "Present"},
    )

    assert resp.status_code == 403
    assert resp.json()["reason"] == "location-unavailable"


async def test_api_sick_needs_no_location(client, db, test_staff):
    await db.commit()

    resp = await client.post(
        "/api/v1/declarations",
        json={"staff_id": str(test_staff["id"]), "status": "Sick"},
    )

    assert resp.status_code == 201


async def test_api_unknown_status_rejected(client, db, test_staff):
    await db.commit()

    resp = await client.post(
        "/api/v1/declarations",
        json={"staff_id": str(test_staff["id"]), "status": "Holiday"},
    )

    assert resp.status_code == 422
    assert resp.json()["reason"] == "validation-error"


async def test_api_unknown_staff_returns_not_found(client):
    resp = await client.post(
        "/api/v1/declarations",
        json={"staff_id": str(uuid.uuid4()), "status": "Leave"},
    )

    assert resp.status_code == 404
    assert resp.json()["reason"] == "not-found"
