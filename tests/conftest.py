# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
import os
import sys

# Add the src directory to the Python path so the tests run without installing the package
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from libroresenas.db.session import Base
# Import all models to ensure they are registered with Base
import libroresenas.models  # noqa: F401
from libroresenas.models.book import Book, Genre
from libroresenas.models.user import User
from libroresenas.core.security import get_password_hash

# --- Test Database Setup ---
# In-memory SQLite; StaticPool keeps the single connection (and its data) alive for the engine's lifetime
TEST_DATABASE_URL = "sqlite://"

@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow on purpose; hash once and reuse it for every test user."""
    return get_password_hash("password")

@pytest.fixture(scope="function")
def db_engine():
    """A fresh database per test, so commits inside the code under test stay isolated."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(db_engine):
    """Provides a session bound to the per-test database."""
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def make_user(db_session, password_hash):
    """Factory that inserts users directly, skipping the slow create_user path."""
    counter = {"n": 0}

    def _make_user(name=None):
        counter["n"] += 1
        user = User(
            email=f"reader{counter['n']}@example.com",
            name=name or f"Reader {counter['n']}",
            hashed_password=password_hash,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user

@pytest.fixture
def make_book(db_session):
    counter = {"n": 0}

    def _make_book(title=None, author="Ursula K. Le Guin", genre=Genre.SCIENCE_FICTION):
        counter["n"] += 1
        book = Book(title=title or f"Test Book {counter['n']}", author=author, genre=genre)
        db_session.add(book)
        db_session.commit()
        db_session.refresh(book)
        return book

    return _make_book

@pytest.fixture
def user_a(make_user):
    return make_user("Alice")

@pytest.fixture
def user_b(make_user):
    return make_user("Bob")

@pytest.fixture
def book_x(make_book):
    return make_book("The Dispossessed")
