# tests/schemas/test_review_schema.py
import pytest
from pydantic import ValidationError

from libroresenas.schemas.review import ReviewCreate, ReviewUpdate, ReviewSchema
from libroresenas.schemas.user import UserCreate

@pytest.mark.parametrize("rating", [1, 3, 5])
def test_review_create_valid_ratings(rating):
    assert ReviewCreate(rating=rating).rating == rating

@pytest.mark.parametrize("rating", [0, 6, 2.5, "2.5", "three", True, False])
def test_review_create_rejects_bad_ratings(rating):
    with pytest.raises(ValidationError):
        ReviewCreate(rating=rating)

@pytest.mark.parametrize("rating", [3.0, "3"])
def test_review_create_coerces_integral_ratings(rating):
    value = ReviewCreate(rating=rating).rating
    assert value == 3
    assert type(value) is int

def test_review_update_rejects_bool_rating():
    with pytest.raises(ValidationError):
        ReviewUpdate(rating=True)

def test_review_text_is_trimmed_and_limited():
    assert ReviewCreate(rating=4, text="  nice  ").text == "nice"
    assert ReviewCreate(rating=4).text is None
    with pytest.raises(ValidationError):
        ReviewCreate(rating=4, text="y" * 1001)

def test_review_update_partial():
    update = ReviewUpdate(text="changed my mind")
    assert update.model_dump(exclude_unset=True) == {"text": "changed my mind"}

@pytest.mark.parametrize("payload", [
    {},
    {"rating": None},
    {"rating": 7},
    {"user_id": 2},
    {"book_id": 3, "rating": 4},
])
def test_review_update_rejects(payload):
    with pytest.raises(ValidationError):
        ReviewUpdate(**payload)

def test_review_schema_from_orm(db_session, user_a, book_x):
    from libroresenas.models.review import Review

    review = Review(rating=4, text="ok", user_id=user_a.id, book_id=book_x.id)
    db_session.add(review)
    db_session.commit()
    db_session.refresh(review)

    schema = ReviewSchema.model_validate(review)
    assert schema.id == review.id
    assert schema.book_id == book_x.id
    assert schema.rating == 4

def test_user_create_password_is_not_stripped():
    user = UserCreate(email="someone@example.com", name="Someone", password=" secret ")
    assert user.password == " secret "
