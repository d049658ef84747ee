from datetime import datetime, timedelta

import pytest

from randevu.models import AppointmentStatus, Review


@pytest.fixture
def owner(factory):
    return factory.user()


@pytest.fixture
def business(factory, owner):
    return factory.business(owner)


@pytest.fixture
def service(factory, business):
    return factory.service(business, name="Cilt Bakımı")


@pytest.fixture
def completed(factory, business, service):
    return factory.appointment(
        business,
        service,
        datetime.now() - timedelta(days=2),
        status=AppointmentStatus.COMPLETED,
        customer_phone="05321234567",
    )


def review_body(appointment, **overrides):
    body = {
        "appointmentId": appointment.id,
        "rating": 5,
        "comment": "Çok memnun kaldım",
        "customerName": "Selin",
        "customerPhone": "05321234567",
    }
    body.update(overrides)
    return body


class TestCreateReview:
    def test_completed_appointment(self, client, business, completed):
        response = client.post("/reviews", json=review_body(completed))

        assert response.status_code == 201
        body = response.json()
        assert body["businessId"] == business.id
        assert body["isApproved"] is True
        assert body["isVisible"] is True
        assert body["serviceName"] == "Cilt Bakımı"

    def test_only_once(self, client, completed):
        assert client.post("/reviews", json=review_body(completed)).status_code == 201
        assert client.post("/reviews", json=review_body(completed)).status_code == 400

    def test_appointment_must_be_completed(self, client, factory, business, service):
        pending = factory.appointment(business, service, datetime.now(), status=AppointmentStatus.CONFIRMED)
        assert client.post("/reviews", json=review_body(pending)).status_code == 400

    def test_unknown_appointment(self, client, completed):
        response = client.post("/reviews", json=review_body(completed, appointmentId=999))
        assert response.status_code == 404

    @pytest.mark.parametrize(
        "overrides", [{"rating": None}, {"comment": "  "}, {"customerName": None}]
    )
    def test_required_fields(self, client, completed, overrides):
        assert client.post("/reviews", json=review_body(completed, **overrides)).status_code == 400

    def test_rating_range(self, client, completed):
        assert client.post("/reviews", json=review_body(completed, rating=6)).status_code == 422


class TestListReviews:
    def test_visible_reviews_newest_first(self, client, db, factory, business, service):
        reviews = []
        for days_ago in (3, 1, 2):
            appointment = factory.appointment(
                business, service, datetime.now() - timedelta(days=days_ago),
                status=AppointmentStatus.COMPLETED,
            )
            review = Review(
                appointment_id=appointment.id,
                business_id=business.id,
                rating=4,
                comment="İyi",
                customer_name="Ali",
                created_at=datetime.now() - timedelta(days=days_ago),
            )
            db.add(review)
            reviews.append(review)
        reviews[2].is_visible = False
        db.commit()

        body = client.get("/reviews", params={"businessId": business.id}).json()

        assert [r["id"] for r in body["reviews"]] == [reviews[1].id, reviews[0].id]
        assert body["pagination"]["total"] == 2

    def test_requires_business(self, client):
        assert client.get("/reviews").status_code == 400


class TestCanReview:
    def test_eligible(self, client, completed):
        response = client.get(
            "/reviews/can-review",
            params={"appointmentId": completed.id, "customerPhone": "0532 123 45 67"},
        )
        assert response.status_code == 200
        assert response.json()["canReview"] is True
        assert response.json()["appointment"]["serviceName"] == "Cilt Bakımı"

    def test_wrong_phone(self, client, completed):
        response = client.get(
            "/reviews/can-review",
            params={"appointmentId": completed.id, "customerPhone": "05000000000"},
        )
        assert response.status_code == 404
        assert response.json()["canReview"] is False

    def test_already_reviewed(self, client, completed):
        review_id = client.post("/reviews", json=review_body(completed)).json()["id"]

        body = client.get(
            "/reviews/can-review",
            params={"appointmentId": completed.id, "customerPhone": "05321234567"},
        ).json()

        assert body["canReview"] is False
        assert body["existingReviewId"] == review_id

    def test_window_expired(self, client, factory, business, service):
        old = factory.appointment(
            business,
            service,
            datetime.now() - timedelta(days=45),
            status=AppointmentStatus.COMPLETED,
            customer_phone="05321234567",
        )
        body = client.get(
            "/reviews/can-review", params={"appointmentId": old.id, "customerPhone": "05321234567"}
        ).json()
        assert body["canReview"] is False

    def test_missing_parameters(self, client):
        assert client.get("/reviews/can-review").status_code == 400


class TestModeration:
    def test_owner_hides_review(self, client, login, owner, completed):
        review_id = client.post("/reviews", json=review_body(completed)).json()["id"]
        login(owner)

        response = client.put(f"/reviews/{review_id}", json={"isVisible": False})

        assert response.status_code == 200
        assert response.json()["isVisible"] is False

    def test_other_user_cannot_moderate(self, client, factory, login, completed):
        review_id = client.post("/reviews", json=review_body(completed)).json()["id"]
        login(factory.user())

        assert client.put(f"/reviews/{review_id}", json={"isApproved": False}).status_code == 403
        assert client.delete(f"/reviews/{review_id}").status_code == 403

    def test_owner_deletes_review(self, client, login, owner, completed):
        review_id = client.post("/reviews", json=review_body(completed)).json()["id"]
        login(owner)

        assert client.delete(f"/reviews/{review_id}").status_code == 200
        assert client.delete(f"/reviews/{review_id}").status_code == 404
