from datetime import datetime, timedelta
from types import MappingProxyType

import pytest

from randevu.domain.service_requests.matching import (
    KEYWORD_TABLE,
    CategoryFilterBuilder,
    MatchMode,
    find_matching_requests,
    keywords_for,
)
from randevu.models import Business, ResponseStatus, ServiceRequestStatus, Urgency

NOW = datetime(2030, 1, 15, 12, 0)


def ids(requests):
    return [r.id for r in requests]


def open_request(factory, minutes_ago=60, **kwargs):
    values = {
        "created_at": NOW - timedelta(minutes=minutes_ago),
        "expires_at": NOW + timedelta(days=3),
    }
    values.update(kwargs)
    return factory.service_request(**values)


@pytest.fixture
def barber(factory):
    owner = factory.user()
    return factory.business(owner, category="BARBER", province="İstanbul", district="Kadıköy")


class TestKeywords:
    def test_known_code_is_sorted(self):
        assert keywords_for("BARBER") == ["berber", "saç", "traş"]

    def test_unknown_code_matches_itself(self):
        assert keywords_for("TERZI") == ["terzi"]

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            KEYWORD_TABLE["NEW"] = frozenset({"x"})


class TestCategoryFilterBuilder:
    def test_no_signals_builds_nothing(self):
        builder = CategoryFilterBuilder().add_category(None).add_subcategory(None)
        builder.add_legacy_category("")
        assert builder.conditions == ()
        assert builder.build() is None

    def test_one_condition_per_signal(self):
        builder = CategoryFilterBuilder().add_category(3).add_subcategory(7)
        builder.add_legacy_category("MASAJ")
        assert len(builder.conditions) == 2 + 3
        assert builder.build() is not None

    def test_business_subcategory_needs_a_category(self):
        business = Business(category="", category_id=None, subcategory_id=7)
        assert CategoryFilterBuilder.for_business(business).conditions == ()

        business.category_id = 3
        assert len(CategoryFilterBuilder.for_business(business).conditions) == 2


class TestActiveView:
    def test_filters_location_keywords_status_and_expiry(self, db, factory, barber):
        match = open_request(factory, service_name="Berber randevusu", minutes_ago=10)
        open_request(factory, service_name="Oto yıkama")
        open_request(factory, service_name="Berber", province="Ankara")
        open_request(factory, service_name="Berber", district="Beşiktaş")
        open_request(factory, service_name="Berber", expires_at=NOW)
        open_request(factory, service_name="Berber", status=ServiceRequestStatus.CLOSED)
        pending = open_request(
            factory, service_name="Saç boyama", status=ServiceRequestStatus.PENDING
        )

        requests, total = find_matching_requests(db, barber, MatchMode.ACTIVE, now=NOW)

        assert total == 2
        assert ids(requests) == [match.id, pending.id]

    def test_keyword_match_ignores_case(self, db, factory, barber):
        match = open_request(factory, service_name="BERBER hizmeti")
        requests, _ = find_matching_requests(db, barber, now=NOW)
        assert ids(requests) == [match.id]

    def test_requests_answered_by_business_move_to_responded(self, db, factory, barber):
        answered = open_request(factory, service_name="Berber")
        other = open_request(factory, service_name="Berber", minutes_ago=10)
        factory.response(answered, barber)

        active, _ = find_matching_requests(db, barber, MatchMode.ACTIVE, now=NOW)
        responded, _ = find_matching_requests(db, barber, MatchMode.RESPONDED, now=NOW)

        assert ids(active) == [other.id]
        assert ids(responded) == [answered.id]

    def test_another_business_response_does_not_hide_request(self, db, factory, barber):
        service_request = open_request(factory, service_name="Berber")
        rival = factory.business(factory.user(), category="BARBER")
        factory.response(service_request, rival)

        requests, _ = find_matching_requests(db, barber, now=NOW)
        assert ids(requests) == [service_request.id]

    def test_requests_with_offers_stay_open_to_other_businesses(self, db, factory, barber):
        service_request = open_request(
            factory, service_name="Berber", status=ServiceRequestStatus.RESPONDED
        )
        factory.response(service_request, factory.business(factory.user(), category="BARBER"))

        requests, _ = find_matching_requests(db, barber, now=NOW)
        assert ids(requests) == [service_request.id]

    def test_urgency_then_newest_first(self, db, factory, barber):
        low = open_request(factory, urgency=Urgency.LOW, minutes_ago=1)
        urgent = open_request(factory, urgency=Urgency.URGENT, minutes_ago=300)
        normal_old = open_request(factory, urgency=Urgency.NORMAL, minutes_ago=200)
        normal_new = open_request(factory, urgency=Urgency.NORMAL, minutes_ago=100)
        high = open_request(factory, urgency=Urgency.HIGH, minutes_ago=400)

        requests, _ = find_matching_requests(db, barber, now=NOW)

        assert ids(requests) == [urgent.id, high.id, normal_new.id, normal_old.id, low.id]

    def test_pagination(self, db, factory, barber):
        created = [open_request(factory, minutes_ago=m) for m in (10, 20, 30, 40, 50)]

        page, total = find_matching_requests(db, barber, page=2, limit=2, now=NOW)

        assert total == 5
        assert ids(page) == [created[2].id, created[3].id]

    def test_business_without_any_signal_matches_all_open_requests(self, db, factory):
        bare = factory.business(factory.user(), category="")
        first = open_request(factory, service_name="Düğün fotoğrafı", province="İzmir")
        second = open_request(factory, service_name="Kurs", province=None, district=None)
        open_request(factory, expires_at=NOW - timedelta(seconds=1))

        requests, total = find_matching_requests(db, bare, now=NOW)

        assert total == 2
        assert set(ids(requests)) == {first.id, second.id}

    def test_structured_categories_are_alternatives(self, db, factory):
        category = factory.category()
        other_category = factory.category(name="Otomotiv")
        subcategory = factory.subcategory(other_category)
        business = factory.business(
            factory.user(),
            category="",
            category_id=category.id,
            subcategory_id=subcategory.id,
        )
        by_category = open_request(factory, category_id=category.id, minutes_ago=1)
        by_subcategory = open_request(
            factory, category_id=other_category.id, subcategory_id=subcategory.id, minutes_ago=2
        )
        open_request(factory, category_id=other_category.id, minutes_ago=3)
        open_request(factory, service_name="Berber", minutes_ago=4)

        requests, _ = find_matching_requests(db, business, now=NOW)

        assert ids(requests) == [by_category.id, by_subcategory.id]

    def test_injected_keyword_table(self, db, factory, barber):
        table = MappingProxyType({"BARBER": frozenset({"kesim"})})
        cut = open_request(factory, service_name="Saç kesimi", minutes_ago=1)
        open_request(factory, service_name="Berber", minutes_ago=2)

        requests, _ = find_matching_requests(db, barber, now=NOW, keyword_table=table)

        assert ids(requests) == [cut.id]

    def test_like_wildcards_in_keywords_are_literal(self, db, factory):
        business = factory.business(factory.user(), category="100%")
        literal = open_request(factory, service_name="%100% memnuniyet", minutes_ago=1)
        open_request(factory, service_name="1000 parça", minutes_ago=2)

        requests, _ = find_matching_requests(db, business, now=NOW)

        assert ids(requests) == [literal.id]


class TestAcceptedView:
    def test_only_requests_where_business_offer_was_accepted(self, db, factory, barber):
        accepted = open_request(factory, status=ServiceRequestStatus.ACCEPTED)
        rejected = open_request(factory, minutes_ago=5)
        factory.response(accepted, barber, status=ResponseStatus.ACCEPTED)
        factory.response(rejected, barber, status=ResponseStatus.REJECTED)

        requests, total = find_matching_requests(db, barber, MatchMode.ACCEPTED, now=NOW)

        assert total == 1
        assert ids(requests) == [accepted.id]

    def test_ignores_expiry(self, db, factory, barber):
        old = open_request(factory, expires_at=NOW - timedelta(days=10))
        factory.response(old, barber, status=ResponseStatus.ACCEPTED)

        requests, _ = find_matching_requests(db, barber, MatchMode.ACCEPTED, now=NOW)
        assert ids(requests) == [old.id]
