"""Tests for movie reviews."""
from tests.conftest import auth_headers, register_user


def _review(client, token, movie_id=550, rating=4, text="Solid film"):
    return client.post(
        "/api/reviews/",
        json={"movie_id": movie_id, "rating": rating, "text": text},
        headers=auth_headers(token),
    )


class TestCreateReview:

    def test_create(self, client):
        user, token = register_user(client, email="critic@example.com")
        resp = _review(client, token, text="  Loved it  ")
        assert resp.status_code == 201
        data = resp.json()["data"]
        assert data["user_id"] == user["user_id"]
        assert data["user_email"] == "critic@example.com"
        assert data["rating"] == 4
        assert data["text"] == "Loved it"

    def test_one_review_per_movie(self, client):
        _, token = register_user(client)
        _review(client, token)
        resp = _review(client, token, rating=2)
        assert resp.status_code == 409
        assert resp.json()["message"] == (
            "You have already reviewed this movie. You can update your existing review."
        )

    def test_rating_out_of_range(self, client):
        _, token = register_user(client)
        for rating in (0, 6):
            resp = _review(client, token, rating=rating)
            assert resp.status_code == 400
            assert resp.json()["message"] == "Rating must be a number between 1 and 5"

    def test_boolean_rating_and_movie_id_rejected(self, client):
        _, token = register_user(client)
        assert _review(client, token, rating=True).status_code == 400
        assert _review(client, token, movie_id=True).status_code == 400
        assert client.get("/api/reviews/").json()["data"]["pagination"]["total"] == 0

    def test_boolean_rating_rejected_on_update(self, client):
        _, token = register_user(client)
        review = _review(client, token, rating=3).json()["data"]
        resp = client.put(
            f"/api/reviews/{review['review_id']}",
            json={"rating": True},
            headers=auth_headers(token),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "validation_error"

    def test_empty_text(self, client):
        _, token = register_user(client)
        resp = _review(client, token, text="   ")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Review text cannot be empty"

    def test_requires_auth(self, client):
        resp = client.post("/api/reviews/", json={"movie_id": 550, "rating": 4, "text": "x"})
        assert resp.status_code == 401


class TestListReviews:

    def test_filters_and_pagination(self, client):
        alice, alice_token = register_user(client, email="alice@example.com")
        _, bob_token = register_user(client, email="bob@example.com")
        _review(client, alice_token, movie_id=550)
        _review(client, alice_token, movie_id=680)
        _review(client, bob_token, movie_id=550)

        data = client.get("/api/reviews/?movie_id=550").json()["data"]
        assert data["pagination"]["total"] == 2
        assert {r["movie_id"] for r in data["reviews"]} == {550}

        data = client.get(f"/api/reviews/?user_id={alice['user_id']}&limit=1").json()["data"]
        assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}
        assert len(data["reviews"]) == 1
        # Newest first
        assert data["reviews"][0]["movie_id"] == 680

    def test_bad_pagination(self, client):
        assert client.get("/api/reviews/?page=0").status_code == 400
        resp = client.get("/api/reviews/?limit=1000")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Limit must be between 1 and 100"

    def test_movie_reviews(self, client):
        _, alice_token = register_user(client, email="alice@example.com")
        _, bob_token = register_user(client, email="bob@example.com")
        _review(client, alice_token, movie_id=550, rating=5)
        _review(client, bob_token, movie_id=550, rating=3)

        resp = client.get("/api/movies/550/reviews")
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["movie_id"] == 550
        assert data["count"] == 2
        assert [r["user_email"] for r in data["reviews"]] == ["bob@example.com", "alice@example.com"]


class TestUpdateAndDeleteReview:

    def test_update_partial(self, client):
        _, token = register_user(client)
        review = _review(client, token).json()["data"]
        resp = client.put(
            f"/api/reviews/{review['review_id']}",
            json={"rating": 2},
            headers=auth_headers(token),
        )
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["rating"] == 2
        assert data["text"] == review["text"]

    def test_update_without_fields(self, client):
        _, token = register_user(client)
        review = _review(client, token).json()["data"]
        resp = client.put(f"/api/reviews/{review['review_id']}", json={}, headers=auth_headers(token))
        assert resp.status_code == 400
        assert resp.json()["error"] == "no_op"

    def test_only_author_can_update_or_delete(self, client):
        _, author = register_user(client, email="author@example.com")
        _, other = register_user(client, email="other@example.com")
        review = _review(client, author).json()["data"]

        resp = client.put(
            f"/api/reviews/{review['review_id']}",
            json={"text": "hijacked"},
            headers=auth_headers(other),
        )
        assert resp.status_code == 403
        assert resp.json()["message"] == "You can only update your own reviews"
        resp = client.delete(f"/api/reviews/{review['review_id']}", headers=auth_headers(other))
        assert resp.status_code == 403

    def test_delete(self, client):
        _, token = register_user(client)
        review = _review(client, token).json()["data"]
        assert client.delete(f"/api/reviews/{review['review_id']}", headers=auth_headers(token)).status_code == 200
        resp = client.delete(f"/api/reviews/{review['review_id']}", headers=auth_headers(token))
        assert resp.status_code == 404
        # The movie can be reviewed again once the old review is gone
        assert _review(client, token).status_code == 201
