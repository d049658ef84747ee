from datetime import date, datetime, time

import pytest
from fastapi import HTTPException

from randevu.domain.raffle.rights import available_rights, draw_date, month_bounds
from randevu.domain.raffle.service import RaffleService
from randevu.models import AppointmentStatus, Raffle, RaffleParticipation

TODAY = date.today()
FIRST_OF_MONTH = datetime.combine(TODAY.replace(day=1), time(10, 0))


class TestRights:
    def test_month_bounds(self):
        start, end = month_bounds(date(2030, 2, 10))
        assert start == datetime(2030, 2, 1)
        assert end.date() == date(2030, 2, 28)
        assert end.time() == time.max

    @pytest.mark.parametrize(
        "day, expected",
        [(date(2028, 2, 5), date(2028, 2, 29)), (date(2030, 12, 31), date(2030, 12, 31))],
    )
    def test_draw_on_last_day(self, day, expected):
        assert draw_date(day) == expected

    @pytest.mark.parametrize("total, used, expected", [(3, 1, 2), (2, 2, 0), (1, 4, 0)])
    def test_available_rights(self, total, used, expected):
        assert available_rights(total, used) == expected


@pytest.fixture
def customer(factory):
    return factory.user(email="musteri@example.com")


@pytest.fixture
def earned(factory, customer):
    business = factory.business(factory.user())
    service = factory.service(business, name="Masaj")
    for hour in (0, 2):
        factory.appointment(
            business,
            service,
            FIRST_OF_MONTH.replace(hour=10 + hour),
            status=AppointmentStatus.COMPLETED,
            customer_email=customer.email,
        )
    factory.appointment(
        business, service, FIRST_OF_MONTH, status=AppointmentStatus.CONFIRMED,
        customer_email=customer.email,
    )
    factory.appointment(
        business, service, FIRST_OF_MONTH, status=AppointmentStatus.COMPLETED,
        customer_email="baskasi@example.com",
    )
    return business


class TestRaffleApi:
    def test_rights_from_completed_appointments(self, client, login, customer, earned):
        login(customer)

        body = client.get("/raffle/data").json()

        assert body["currentMonth"] == f"{TODAY.month:02d}"
        assert body["totalRights"] == 2
        assert body["availableRights"] == 2
        assert [a["time"] for a in body["eligibleAppointments"]] == ["12:00", "10:00"]
        assert body["eligibleAppointments"][0]["service"]["name"] == "Masaj"
        assert body["nextDrawDate"] == draw_date(TODAY).isoformat()
        assert body["raffleHistory"] == []

    def test_participation_spends_rights(self, client, db, login, customer, earned):
        login(customer)

        first = client.post("/raffle/participate", json={"rightsToUse": 1})
        second = client.post("/raffle/participate", json={"rightsToUse": 2})
        body = client.get("/raffle/data").json()

        assert first.status_code == 200
        assert first.json()["rightsUsed"] == 1
        assert second.status_code == 400
        assert second.json()["detail"] == "Sadece 1 adet hakkınız bulunuyor"
        assert body["usedRights"] == 1
        assert body["availableRights"] == 1
        assert db.query(Raffle).count() == 1

    @pytest.mark.parametrize("body", [{}, {"rightsToUse": 0}, {"rightsToUse": -1}])
    def test_invalid_rights(self, client, login, customer, body):
        login(customer)
        assert client.post("/raffle/participate", json=body).status_code == 400

    def test_requires_login(self, client):
        assert client.get("/raffle/data").status_code in (401, 403)


class TestHistory:
    def test_earlier_months_are_listed(self, db, customer, earned):
        service = RaffleService(db)
        service.participate(1, customer, today=TODAY)

        later = date(TODAY.year + 1, TODAY.month, 1)
        body = service.get_raffle_data(customer, today=later)

        assert body["totalRights"] == 0
        assert len(body["raffleHistory"]) == 1
        entry = body["raffleHistory"][0]
        assert entry["participatedRights"] == 1
        assert entry["won"] is False
        assert entry["prize"]["title"] == "iPhone 15 Pro Max"

    def test_no_rights_next_year(self, db, customer, earned):
        with pytest.raises(HTTPException) as exc:
            RaffleService(db).participate(1, customer, today=date(TODAY.year + 1, 1, 15))
        assert exc.value.status_code == 400
        assert db.query(RaffleParticipation).count() == 0
