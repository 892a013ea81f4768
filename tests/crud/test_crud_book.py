# tests/crud/test_crud_book.py
import pytest
from sqlalchemy.exc import OperationalError

from libroresenas.crud import (
    create_book,
    search_books,
    count_books,
    get_book_by_id,
    require_book,
    list_genres,
    create_review,
)
from libroresenas.core.exceptions import DuplicateError, NotFoundError, StorageError, ValidationError
from libroresenas.models.book import Genre
from libroresenas.schemas.book import BookCreate, BookSchema
from libroresenas.schemas.review import ReviewCreate

@pytest.fixture
def catalog(db_session):
    books = [
        BookCreate(title="Dune", author="Frank Herbert", genre=Genre.SCIENCE_FICTION),
        BookCreate(title="The Hobbit", author="J. R. R. Tolkien", genre=Genre.FANTASY),
        BookCreate(title="Gone Girl", author="Gillian Flynn", genre=Genre.MYSTERY),
        BookCreate(title="Children of Dune", author="Frank Herbert", genre=Genre.SCIENCE_FICTION),
    ]
    return [create_book(db_session, book) for book in books]

def test_create_book(db_session):
    book = create_book(db_session, BookCreate(title="  The Left Hand of Darkness ", author="Ursula K. Le Guin",
                                              genre=Genre.SCIENCE_FICTION))

    assert book.id is not None
    assert book.title == "The Left Hand of Darkness"
    assert book.slug == "the-left-hand-of-darkness"
    assert book.average_rating == 0
    assert book.review_count == 0
    assert get_book_by_id(db_session, book.id) is book

def test_create_book_from_dict_defaults_genre(db_session):
    book = create_book(db_session, {"title": "Notes", "author": "Someone"})
    assert book.genre is Genre.OTHER

@pytest.mark.parametrize("payload", [
    {"title": "", "author": "Someone"},
    {"title": "x" * 201, "author": "Someone"},
    {"title": "Short", "author": "A"},
    {"title": "Bad genre", "author": "Someone", "genre": "Poetry"},
    {"title": "Sneaky", "author": "Someone", "average_rating": 5},
])
def test_create_book_invalid(db_session, payload):
    with pytest.raises(ValidationError):
        create_book(db_session, payload)

def test_create_book_duplicate_is_case_insensitive(db_session, catalog):
    with pytest.raises(DuplicateError):
        create_book(db_session, BookCreate(title="dune", author="FRANK HERBERT"))

def test_same_title_different_author_allowed(db_session, catalog):
    book = create_book(db_session, BookCreate(title="Dune", author="Someone Else"))
    assert book.slug == "dune"

def test_require_book(db_session, catalog):
    assert require_book(db_session, catalog[0].id) is catalog[0]
    with pytest.raises(NotFoundError):
        require_book(db_session, 99999)

def test_search_books_filters(db_session, catalog):
    assert {b.title for b in search_books(db_session, genre="Science Fiction")} == {"Dune", "Children of Dune"}
    assert len(search_books(db_session, genre="all")) == 4
    assert {b.title for b in search_books(db_session, author="herbert")} == {"Dune", "Children of Dune"}
    assert {b.title for b in search_books(db_session, query="tolkien")} == {"The Hobbit"}
    assert {b.title for b in search_books(db_session, query="dune")} == {"Dune", "Children of Dune"}
    assert count_books(db_session, genre="Science Fiction") == 2
    assert count_books(db_session) == 4

def test_search_books_unknown_genre(db_session, catalog):
    with pytest.raises(ValidationError):
        search_books(db_session, genre="Poetry")

def test_search_books_sorting_and_paging(db_session, catalog):
    by_title = search_books(db_session, sort_by="title", sort_order="asc")
    assert [b.title for b in by_title] == ["Children of Dune", "Dune", "Gone Girl", "The Hobbit"]

    # Unknown sort field falls back to newest first
    newest = search_books(db_session, sort_by="slug")
    assert newest[0].title == "Children of Dune"

    page = search_books(db_session, sort_by="title", sort_order="asc", skip=1, limit=2)
    assert [b.title for b in page] == ["Dune", "Gone Girl"]

def test_search_books_sort_by_rating(db_session, catalog, make_user):
    dune, hobbit = catalog[0], catalog[1]
    create_review(db_session, ReviewCreate(rating=3), make_user().id, dune.id)
    create_review(db_session, ReviewCreate(rating=5), make_user().id, hobbit.id)

    top = search_books(db_session, sort_by="average_rating", sort_order="desc", limit=2)
    assert [b.title for b in top] == ["The Hobbit", "Dune"]

def test_list_genres():
    genres = list_genres()
    assert len(genres) == 16
    assert genres[0] == "Fiction"
    assert "Young Adult" in genres
    assert genres[-1] == "Other"

def test_book_schema_from_orm(db_session, catalog):
    schema = BookSchema.model_validate(catalog[0])
    assert schema.title == "Dune"
    assert schema.genre is Genre.SCIENCE_FICTION
    assert (schema.average_rating, schema.review_count) == (0.0, 0)

def test_search_books_database_error(db_session, catalog, monkeypatch):
    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT books", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "execute", broken_execute)
    with pytest.raises(StorageError):
        search_books(db_session, query="dune")
    with pytest.raises(StorageError):
        count_books(db_session)
