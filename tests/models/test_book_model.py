# tests/models/test_book_model.py
import pytest
from sqlalchemy.exc import IntegrityError, StatementError

from libroresenas.models.book import Book, Genre, slugify_title

def test_create_book_defaults(db_session):
    """A new book starts with no reviews and a zero average."""
    book = Book(title="The Left Hand of Darkness", author="Ursula K. Le Guin", genre=Genre.SCIENCE_FICTION)
    db_session.add(book)
    db_session.commit()

    retrieved_book = db_session.query(Book).filter(Book.title == "The Left Hand of Darkness").first()

    assert retrieved_book is not None
    assert retrieved_book.id is not None
    assert retrieved_book.genre is Genre.SCIENCE_FICTION
    assert retrieved_book.average_rating == 0
    assert retrieved_book.review_count == 0
    assert retrieved_book.created_at is not None

def test_genre_defaults_to_other(db_session):
    book = Book(title="Untitled", author="Anonymous")
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    assert book.genre is Genre.OTHER

def test_create_book_no_title(db_session):
    """Test that creating a book without a title raises IntegrityError."""
    book = Book(author="Some Author")
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_invalid_genre_rejected(db_session):
    book = Book(title="Bad Genre", author="Some Author", genre="Poetry")
    db_session.add(book)

    with pytest.raises(StatementError):
        db_session.commit()

def test_average_rating_out_of_range_rejected(db_session):
    book = Book(title="Too Good", author="Some Author", average_rating=5.5)
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

def test_negative_review_count_rejected(db_session):
    book = Book(title="Negative", author="Some Author", review_count=-1)
    db_session.add(book)

    with pytest.raises(IntegrityError):
        db_session.commit()

@pytest.mark.parametrize("title, expected", [
    ("The Left Hand of Darkness", "the-left-hand-of-darkness"),
    ("  Dune:   Messiah! ", "dune-messiah"),
    ("Self-Help 101", "self-help-101"),
])
def test_slugify_title(title, expected):
    assert slugify_title(title) == expected

def test_book_repr(db_session):
    """Test the __repr__ method of the Book model."""
    title = "Representation Test Book Title That Is Quite Long"

    book = Book(title=title, author="Some Author")
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)

    expected_repr = f"<Book(id={book.id}, title='{title[:30]}', average_rating=0.0, review_count=0)>"
    assert repr(book) == expected_repr
