"""
Matching of open service requests to a business.

A business sees a request in the ``active`` view when the request is still
open, unexpired, in the business's province/district, not yet answered by
the business, and matches at least one of its category signals (structured
category, subcategory, or a legacy category keyword in the service name).
"""

import enum
import logging
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Optional

from sqlalchemy import case, or_
from sqlalchemy.orm import Query, Session, joinedload, selectinload

from ...models import (
    Business,
    ResponseStatus,
    ServiceRequest,
    ServiceRequestResponse,
    ServiceRequestStatus,
    Urgency,
)

logger = logging.getLogger(__name__)

# Legacy category code -> service name keywords
KEYWORD_TABLE: Mapping[str, frozenset] = MappingProxyType(
    {
        "BARBER": frozenset({"berber", "saç", "traş"}),
        "BEAUTY_SALON": frozenset({"kuaför", "güzellik", "makyaj"}),
        "DISHEKIMI": frozenset({"diş", "dişhekimi"}),
        "OTOYIKAMA": frozenset({"oto", "araç", "yıkama"}),
        "SPORSALONU": frozenset({"spor", "fitness", "gym"}),
        "GUZELLIKMERKEZI": frozenset({"güzellik", "estetik", "cilt"}),
        "VETERINER": frozenset({"veteriner", "hayvan", "pet"}),
        "MASAJ": frozenset({"masaj", "spa", "wellness"}),
        "DUGUNSALONU": frozenset({"düğün", "nikah", "salon"}),
        "KURSMERKEZI": frozenset({"kurs", "eğitim", "ders"}),
    }
)

URGENCY_RANK = MappingProxyType(
    {Urgency.URGENT: 4, Urgency.HIGH: 3, Urgency.NORMAL: 2, Urgency.LOW: 1}
)

# Requests that still accept offers; RESPONDED ones already have at least one
OPEN_STATUSES = (
    ServiceRequestStatus.ACTIVE,
    ServiceRequestStatus.PENDING,
    ServiceRequestStatus.RESPONDED,
)


class MatchMode(str, enum.Enum):
    ACTIVE = "active"
    RESPONDED = "responded"
    ACCEPTED = "accepted"


def keywords_for(code: str, keyword_table: Mapping[str, frozenset] = KEYWORD_TABLE) -> list[str]:
    """Keywords of a legacy category; unknown codes match on the code itself"""
    keywords = keyword_table.get(code)
    if keywords is None:
        return [code.lower()]
    return sorted(keywords)


class CategoryFilterBuilder:
    """Collects category conditions that are OR-ed together"""

    def __init__(self, keyword_table: Mapping[str, frozenset] = KEYWORD_TABLE):
        self.keyword_table = keyword_table
        self._conditions = []

    @property
    def conditions(self) -> tuple:
        return tuple(self._conditions)

    def add_category(self, category_id: Optional[int]) -> "CategoryFilterBuilder":
        if category_id is not None:
            self._conditions.append(ServiceRequest.category_id == category_id)
        return self

    def add_subcategory(self, subcategory_id: Optional[int]) -> "CategoryFilterBuilder":
        if subcategory_id is not None:
            self._conditions.append(ServiceRequest.subcategory_id == subcategory_id)
        return self

    def add_legacy_category(self, code: Optional[str]) -> "CategoryFilterBuilder":
        if code:
            for keyword in keywords_for(code, self.keyword_table):
                self._conditions.append(
                    ServiceRequest.service_name.icontains(keyword, autoescape=True)
                )
        return self

    def build(self):
        """``OR(...)`` of the collected conditions, or None when there are none"""
        if not self._conditions:
            return None
        return or_(*self._conditions)

    @classmethod
    def for_business(
        cls, business: Business, keyword_table: Mapping[str, frozenset] = KEYWORD_TABLE
    ) -> "CategoryFilterBuilder":
        builder = cls(keyword_table).add_category(business.category_id)
        if business.category_id is not None:
            builder.add_subcategory(business.subcategory_id)
        return builder.add_legacy_category(business.category)


def urgency_order():
    """Sort key ranking URGENT > HIGH > NORMAL > LOW"""
    return case(
        {urgency.value: rank for urgency, rank in URGENCY_RANK.items()},
        value=ServiceRequest.urgency,
        else_=0,
    ).desc()


def build_match_query(
    db: Session,
    business: Business,
    mode: MatchMode,
    now: datetime,
    keyword_table: Mapping[str, frozenset] = KEYWORD_TABLE,
) -> Query:
    query = db.query(ServiceRequest)
    answered_by_business = ServiceRequest.responses.any(
        ServiceRequestResponse.business_id == business.id
    )

    if mode == MatchMode.ACTIVE:
        query = query.filter(
            ServiceRequest.status.in_(OPEN_STATUSES),
            ServiceRequest.expires_at > now,
            ~answered_by_business,
        )
        category_filter = CategoryFilterBuilder.for_business(business, keyword_table).build()
        if category_filter is not None:
            query = query.filter(category_filter)
        if business.province:
            query = query.filter(ServiceRequest.province == business.province)
        if business.district:
            query = query.filter(ServiceRequest.district == business.district)
    elif mode == MatchMode.RESPONDED:
        query = query.filter(answered_by_business)
    else:
        query = query.filter(
            ServiceRequest.responses.any(
                (ServiceRequestResponse.business_id == business.id)
                & (ServiceRequestResponse.status == ResponseStatus.ACCEPTED)
            )
        )
    return query


def find_matching_requests(
    db: Session,
    business: Business,
    mode: MatchMode = MatchMode.ACTIVE,
    page: int = 1,
    limit: int = 20,
    now: Optional[datetime] = None,
    keyword_table: Mapping[str, frozenset] = KEYWORD_TABLE,
) -> tuple[list[ServiceRequest], int]:
    """
    Page of requests visible to ``business`` in the given view mode.

    Returns:
        Tuple of (requests, total matching count)
    """
    now = now or datetime.now()
    query = build_match_query(db, business, mode, now, keyword_table)
    total = query.count()
    requests = (
        query.options(selectinload(ServiceRequest.responses), joinedload(ServiceRequest.user))
        .order_by(urgency_order(), ServiceRequest.created_at.desc(), ServiceRequest.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    logger.debug(
        f"Business {business.id} {mode.value} view: {len(requests)}/{total} requests (page {page})"
    )
    return requests, total
