import pytest

from randevu.models import Business, User, UserRole


def business_body(**overrides):
    body = {
        "name": "Güzel Saçlar Kuaför",
        "category": "beauty_salon",
        "phone": "0532 123 45 67",
        "email": "Info@GuzelSaclar.com",
        "address": "Bağdat Caddesi No: 12 Kadıköy",
        "province": "İstanbul",
        "district": "Kadıköy",
    }
    body.update(overrides)
    return body


@pytest.fixture
def user(factory):
    return factory.user()


class TestCreateBusiness:
    def test_creates_with_slug_and_promotes_owner(self, client, db, login, user):
        login(user)

        response = client.post("/businesses", json=business_body())

        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "guzel-saclar-kuafor"
        assert body["category"] == "BEAUTY_SALON"
        assert body["phone"] == "05321234567"
        assert body["email"] == "info@guzelsaclar.com"
        db.expire_all()
        assert db.get(User, user.id).role == UserRole.BUSINESS_OWNER

    def test_slug_collisions_get_a_counter(self, client, login, user):
        login(user)
        slugs = [client.post("/businesses", json=business_body()).json()["slug"] for _ in range(3)]
        assert slugs == ["guzel-saclar-kuafor", "guzel-saclar-kuafor-1", "guzel-saclar-kuafor-2"]

    def test_category_defaults_to_other(self, client, login, user):
        login(user)
        response = client.post("/businesses", json=business_body(category=None))
        assert response.json()["category"] == "OTHER"

    @pytest.mark.parametrize(
        "field, value",
        [("name", "A"), ("phone", "123"), ("email", "yok"), ("address", "Kısa")],
    )
    def test_validation(self, client, login, user, field, value):
        login(user)
        response = client.post("/businesses", json=business_body(**{field: value}))
        assert response.status_code == 422

    def test_default_week(self, client, login, user):
        login(user)
        client.post("/businesses", json=business_body())

        response = client.get("/settings/working-hours")

        assert response.status_code == 200
        hours = response.json()["workingHours"]
        assert [h["dayOfWeek"] for h in hours] == [0, 1, 2, 3, 4, 5, 6]
        assert hours[0]["isOpen"] is False
        assert hours[1] == {"dayOfWeek": 1, "isOpen": True, "openTime": "09:00", "closeTime": "18:00"}
        assert hours[6]["closeTime"] == "17:00"
        assert response.json()["appointmentSettings"]["slotDuration"] == 60


class TestLookup:
    def test_list_and_current(self, client, factory, login, user):
        first = factory.business(user)
        factory.business(user)
        factory.business(factory.user())
        login(user)

        assert len(client.get("/businesses").json()) == 2
        assert client.get("/businesses/current").json()["id"] == first.id

    def test_current_without_business(self, client, login, user):
        login(user)
        assert client.get("/businesses/current").status_code == 404

    def test_public_profile_lists_active_services(self, client, factory, user):
        business = factory.business(user, slug="moda-berber")
        factory.service(business, name="Saç Kesimi")
        factory.service(business, name="Eski Hizmet", is_active=False)

        response = client.get("/businesses/public/moda-berber")

        assert response.status_code == 200
        assert [s["name"] for s in response.json()["services"]] == ["Saç Kesimi"]

    def test_inactive_business_is_hidden(self, client, factory, user):
        factory.business(user, slug="kapali", is_active=False)
        assert client.get("/businesses/public/kapali").status_code == 404


class TestWorkingHours:
    def test_replace_week_skips_invalid_entries(self, client, db, factory, login, user):
        business = factory.business(user)
        login(user)

        response = client.put(
            "/settings/working-hours",
            json={
                "workingHours": [
                    {"dayOfWeek": 1, "isOpen": True, "openTime": "10:00", "closeTime": "19:00"},
                    {"dayOfWeek": 9, "isOpen": True, "openTime": "10:00", "closeTime": "19:00"},
                    {"dayOfWeek": 2, "isOpen": "evet", "openTime": "10:00", "closeTime": "19:00"},
                    {"dayOfWeek": 3, "isOpen": True, "openTime": "9:00", "closeTime": "19:00"},
                ],
                "appointmentSettings": {"slotDuration": 30, "minAdvanceBooking": 0},
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["workingHours"] == [
            {"dayOfWeek": 1, "isOpen": True, "openTime": "10:00", "closeTime": "19:00"}
        ]
        assert body["appointmentSettings"]["slotDuration"] == 30
        assert body["appointmentSettings"]["bufferTime"] == 15
        db.expire_all()
        assert db.get(Business, business.id).appointment_settings["slotDuration"] == 30

    def test_settings_are_kept_when_omitted(self, client, factory, login, user):
        factory.business(user, appointment_settings={"slotDuration": 45})
        login(user)

        response = client.put("/settings/working-hours", json={"workingHours": []})

        assert response.json()["workingHours"] == []
        assert response.json()["appointmentSettings"]["slotDuration"] == 45


class TestCategories:
    def test_categories_with_subcategories(self, client, factory):
        beauty = factory.category(name="Güzellik", order_index=2)
        auto = factory.category(name="Otomotiv", order_index=1)
        factory.category(name="Pasif", is_active=False)
        factory.subcategory(beauty, name="Saç")
        factory.subcategory(beauty, name="Gizli", is_active=False)

        plain = client.get("/categories").json()
        nested = client.get("/categories", params={"include": "subcategories"}).json()

        assert [c["id"] for c in plain] == [auto.id, beauty.id]
        assert plain[1]["subcategories"] is None
        assert [s["name"] for s in nested[1]["subcategories"]] == ["Saç"]

    def test_subcategories_require_category(self, client, factory):
        beauty = factory.category()
        factory.subcategory(beauty, name="Saç")

        assert client.get("/subcategories").status_code == 400
        response = client.get("/subcategories", params={"categoryId": beauty.id})
        assert [s["name"] for s in response.json()] == ["Saç"]
