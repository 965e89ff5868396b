from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from timesheet_compare import models  # noqa: F401
from timesheet_compare.database import Base, get_db
from timesheet_compare.main import app
from timesheet_compare.models import Employee
from timesheet_compare.schemas.timesheet import EmployeeTimesheet, TimesheetImportRequest
from timesheet_compare.services.timesheet_store import TimesheetCache, TimesheetStore
from tests.factories import make_entry


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def employee(db) -> Employee:
    employee = Employee(
        employee_id="E100",
        first_name="Amina",
        last_name="Rahman",
        date_of_joining=date(2025, 12, 1),
    )
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@pytest.fixture
def cache() -> TimesheetCache:
    return TimesheetCache()


@pytest.fixture
def loaded_timesheet(db, cache) -> TimesheetStore:
    store = TimesheetStore(db, cache)
    store.save_import(TimesheetImportRequest(employees=[
        EmployeeTimesheet(
            employee_id="E100",
            employee_name="Amina Rahman",
            company="Sample Contracting",
            entries=[
                make_entry("01/01/2026", "08:00", "17:00", "08:00", "Thursday"),
                make_entry("02/01/2026", "23:50", "00:10", "00:20", "Friday"),
                make_entry("03/01/2026", None, "17:00", "03:30", "Saturday"),
            ],
        ),
        EmployeeTimesheet(
            employee_id="E200",
            employee_name="Omar Haddad",
            company="Sample Contracting",
            entries=[make_entry("05/01/2026", "09:00", "18:00", "09:00", "Monday")],
        ),
    ]))
    return store


@pytest.fixture
def client(db, cache):
    app.dependency_overrides[get_db] = lambda: db
    app.state.timesheet_cache = cache
    yield TestClient(app)
    app.dependency_overrides.clear()
