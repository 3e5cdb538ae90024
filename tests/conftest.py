from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from labtrack.database import Base, get_db
from labtrack.main import app
from labtrack.schemas.reference_standard import ReferenceRule
from labtrack.seed.reference_seed import seed_parameters


@pytest.fixture()
def db_session() -> Generator:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def seeded_session(db_session):
    seed_parameters(db_session)
    db_session.commit()
    return db_session


@pytest.fixture()
def client(seeded_session) -> Generator[TestClient, None, None]:
    def override_get_db():
        try:
            yield seeded_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    # Not used as a context manager: the lifespan (alembic head check, seeding) stays off.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def max_rule() -> ReferenceRule:
    return ReferenceRule(parameter_key="turbidez", condition_type="MAX", max_value=5)


@pytest.fixture()
def min_rule() -> ReferenceRule:
    return ReferenceRule(parameter_key="od", condition_type="MIN", min_value=5)


@pytest.fixture()
def range_rule() -> ReferenceRule:
    return ReferenceRule(parameter_key="ph", condition_type="RANGE", min_value=6.0, max_value=9.5)


@pytest.fixture()
def absence_rule() -> ReferenceRule:
    return ReferenceRule(parameter_key="coliformes", condition_type="ABSENCE")


@pytest.fixture()
def exact_rule() -> ReferenceRule:
    return ReferenceRule(parameter_key="odor", condition_type="EXACT_TEXT", expected_text="Sim")
