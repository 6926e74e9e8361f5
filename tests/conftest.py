import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import shopledger.models  # noqa: F401
from shopledger.core.database import Base
from shopledger.storage import MemoryStore, SqlAlchemyStore


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sql_session():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def sql_store(sql_session):
    return SqlAlchemyStore(sql_session)


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Runs the test once per backend."""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("sql_store")
