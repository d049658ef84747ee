from datetime import date, datetime, time, timedelta

import pytest

from randevu.models import AppointmentStatus

TODAY = date.today()
YESTERDAY = TODAY - timedelta(days=1)


def at(day, hour, minute=0):
    return datetime.combine(day, time(hour, minute))


@pytest.fixture
def owner(factory):
    return factory.user()


@pytest.fixture
def business(factory, owner):
    return factory.business(owner)


@pytest.fixture
def seeded(factory, business):
    cut = factory.service(business, name="Saç Kesimi", price=200.0, duration=45)
    color = factory.service(business, name="Boya", price=500.0, duration=90)
    staff = factory.staff(business, name="Elif")

    factory.appointment(business, cut, at(TODAY, 9), status=AppointmentStatus.COMPLETED,
                        customer_email="a@example.com", staff=staff)
    factory.appointment(business, color, at(TODAY, 10), status=AppointmentStatus.COMPLETED,
                        customer_email="b@example.com")
    factory.appointment(business, cut, at(TODAY, 10, 30), status=AppointmentStatus.PENDING,
                        customer_email="a@example.com")
    factory.appointment(business, cut, at(TODAY, 15), status=AppointmentStatus.CANCELLED,
                        customer_email="c@example.com")

    factory.appointment(business, cut, at(YESTERDAY, 11), status=AppointmentStatus.COMPLETED,
                        customer_email="d@example.com")
    factory.appointment(business, cut, at(YESTERDAY, 12), status=AppointmentStatus.CONFIRMED,
                        customer_email="e@example.com")
    return {"cut": cut, "color": color, "staff": staff}


class TestTrends:
    def test_today_against_yesterday(self, client, login, owner, business, seeded):
        login(owner)

        response = client.get("/dashboard/trends", params={"businessId": business.id})

        assert response.status_code == 200
        # today: 4 appointments, 700 revenue, 3 customers, 50% completion
        # yesterday: 2 appointments, 200 revenue, 2 customers, 50% completion
        assert response.json() == {
            "appointments": "+100%",
            "revenue": "+250%",
            "customers": "+50%",
            "completion": "+0%",
        }

    def test_empty_days(self, client, login, owner, business):
        login(owner)
        assert client.get("/dashboard/trends").json() == {
            "appointments": "0%",
            "revenue": "0%",
            "customers": "0%",
            "completion": "0%",
        }

    def test_foreign_business(self, client, factory, login, business):
        login(factory.user())
        assert client.get("/dashboard/trends", params={"businessId": business.id}).status_code == 404


class TestStats:
    def test_requires_business_id(self, client, login, owner, business):
        login(owner)
        assert client.get("/dashboard/stats").status_code == 400

    def test_day_statistics(self, client, login, owner, business, seeded):
        login(owner)

        body = client.get("/dashboard/stats", params={"businessId": business.id}).json()

        assert body["date"] == TODAY.isoformat()
        assert body["totalAppointments"] == 4
        assert body["revenue"] == 700.0
        assert body["completedAppointments"] == 2
        assert body["appointmentsByStatus"] == {
            "PENDING": 1,
            "CONFIRMED": 0,
            "COMPLETED": 2,
            "CANCELLED": 1,
        }
        assert body["hourlyDistribution"] == {"9": 1, "10": 2, "15": 1}

    def test_explicit_date(self, client, login, owner, business, seeded):
        login(owner)
        params = {"businessId": business.id, "date": YESTERDAY.isoformat()}

        body = client.get("/dashboard/stats", params=params).json()

        assert body["totalAppointments"] == 2
        assert body["revenue"] == 200.0

    def test_bad_date(self, client, login, owner, business):
        login(owner)
        params = {"businessId": business.id, "date": "dün"}
        assert client.get("/dashboard/stats", params=params).status_code == 400


class TestTodayAppointments:
    def test_rows_in_time_order(self, client, login, owner, business, seeded):
        login(owner)

        body = client.get("/dashboard/appointments/today").json()

        assert body["success"] is True
        assert body["count"] == 4
        assert [row["time"] for row in body["data"]] == ["09:00", "10:00", "10:30", "15:00"]
        first = body["data"][0]
        assert first["serviceName"] == "Saç Kesimi"
        assert first["staffName"] == "Elif"
        assert first["status"] == "COMPLETED"
        assert first["duration"] == 45
        assert first["price"] == 200.0
        assert body["data"][1]["staffName"] is None

    def test_placeholder_client_name(self, client, factory, login, owner, business):
        service = factory.service(business)
        factory.appointment(business, service, at(TODAY, 12), customer_name="")
        login(owner)

        row = client.get("/dashboard/appointments/today").json()["data"][0]

        assert row["clientName"] == "Bilinmeyen Müşteri"
