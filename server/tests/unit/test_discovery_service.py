"""Unit tests for the discovery service."""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from tour_catalog.models import Difficulty, ScheduleStatus, TourStatus
from tour_catalog.schemas.tour import TourFilterRequest
from tour_catalog.services.catalog_store import TourListing, TourRef
from tour_catalog.services.discovery_service import DiscoveryService, to_tour_item


class RecordingCatalog:
    """In-memory catalog that records the windows it is asked for."""

    def __init__(self, tours, refs=(), locations=()):
        self.tours = list(tours)
        self.refs = list(refs)
        self.locations = list(locations)
        self.calls = []

    async def count(self, criteria):
        self.calls.append(("count", None, None))
        return len(self.tours)

    async def fetch_listings(self, criteria, ordering, *, offset=0, limit, now):
        self.calls.append(("fetch_listings", offset, limit))
        return [TourListing(tour, None) for tour in self.tours[offset:offset + limit]]

    async def fetch_refs(self, criteria, *, limit):
        self.calls.append(("fetch_refs", None, limit))
        return self.refs[:limit]

    async def distinct_locations(self, criteria, *, limit):
        self.calls.append(("distinct_locations", None, limit))
        return self.locations[:limit]


class FailingCatalog(RecordingCatalog):
    async def count(self, criteria):
        raise OperationalError("SELECT count(*) FROM tours", {}, Exception("connection refused"))


def _unsaved(tour_factory, count):
    return [tour_factory(id=uuid4()) for _ in range(count)]


@pytest.mark.asyncio
async def test_second_page_window(tour_factory):
    """Twenty tours, page two of eight: offset eight and three pages in total."""
    catalog = RecordingCatalog(_unsaved(tour_factory, 20))
    service = DiscoveryService(catalog)

    page = await service.get_tours(TourFilterRequest(page=2, limit=8))

    assert ("fetch_listings", 8, 8) in catalog.calls
    assert len(page.tours) == 8
    assert page.pagination.model_dump() == {
        "page": 2,
        "limit": 8,
        "total": 20,
        "total_pages": 3,
        "has_next": True,
        "has_prev": True,
    }


@pytest.mark.asyncio
async def test_defaults_are_first_page_of_eight(discovery_service, tour_factory, seed_tours):
    await seed_tours(*(tour_factory() for _ in range(10)))

    page = await discovery_service.get_tours(TourFilterRequest())

    assert len(page.tours) == 8
    assert page.pagination.page == 1
    assert page.pagination.total == 10
    assert page.pagination.total_pages == 2
    assert page.pagination.has_next is True
    assert page.pagination.has_prev is False


@pytest.mark.asyncio
async def test_second_page_against_database(discovery_service, tour_factory, seed_tours):
    await seed_tours(*(tour_factory(review_count=n) for n in range(20)))

    first = await discovery_service.get_tours(TourFilterRequest(page=1, limit=8))
    second = await discovery_service.get_tours(TourFilterRequest(page=2, limit=8))
    third = await discovery_service.get_tours(TourFilterRequest(page=3, limit=8))

    assert [t.review_count for t in second.tours] == list(range(11, 3, -1))
    assert len(third.tours) == 4
    ids = [t.id for t in first.tours + second.tours + third.tours]
    assert len(set(ids)) == 20


@pytest.mark.asyncio
async def test_price_filter_scenario(discovery_service, tour_factory, seed_tours):
    await seed_tours(
        tour_factory(slug="mid-range", price_adult=Decimal("299.99")),
        tour_factory(slug="premium", price_adult=Decimal("599.99")),
    )

    page = await discovery_service.get_tours(
        TourFilterRequest.model_validate({"priceMin": "200", "priceMax": "500"})
    )

    assert [t.slug for t in page.tours] == ["mid-range"]
    assert page.tours[0].price_adult == pytest.approx(299.99)


@pytest.mark.asyncio
async def test_open_ended_duration_scenario(discovery_service, tour_factory, seed_tours):
    await seed_tours(*(tour_factory(duration_days=days) for days in (1, 3, 5, 8, 12)))

    page = await discovery_service.get_tours(TourFilterRequest(duration="8+"))

    assert sorted(t.duration_days for t in page.tours) == [8, 12]
    assert page.pagination.total == 2


@pytest.mark.asyncio
async def test_search_without_matches(discovery_service, tour_factory, seed_tours):
    await seed_tours(tour_factory(), tour_factory())

    page = await discovery_service.get_tours(TourFilterRequest(search="nonexistent-xyz"))

    assert page.tours == []
    assert page.pagination.total == 0
    assert page.pagination.total_pages == 0
    assert page.pagination.has_next is False


@pytest.mark.asyncio
async def test_page_past_the_end_is_empty(discovery_service, tour_factory, seed_tours):
    await seed_tours(tour_factory(), tour_factory())

    page = await discovery_service.get_tours(TourFilterRequest(page=4, limit=8))

    assert page.tours == []
    assert page.pagination.total == 2
    assert page.pagination.has_prev is True


@pytest.mark.asyncio
async def test_only_published_live_tours_are_listed(discovery_service, tour_factory, seed_tours):
    await seed_tours(
        tour_factory(slug="live"),
        tour_factory(slug="draft", status=TourStatus.DRAFT),
        tour_factory(slug="archived", status=TourStatus.ARCHIVED),
        tour_factory(slug="gone", deleted_at=datetime(2026, 3, 1, tzinfo=timezone.utc)),
    )

    page = await discovery_service.get_tours(TourFilterRequest())

    assert [t.slug for t in page.tours] == ["live"]


@pytest.mark.asyncio
@pytest.mark.parametrize("sort, key, reverse", [
    ("price_asc", lambda t: t.price_adult, False),
    ("price_desc", lambda t: t.price_adult, True),
    ("rating", lambda t: t.rating_average, True),
    ("popular", lambda t: (t.review_count, t.rating_average), True),
])
async def test_sort_modes_order_results(discovery_service, tour_factory, seed_tours, sort, key, reverse):
    await seed_tours(
        tour_factory(price_adult=Decimal("120.00"), rating_average=Decimal("4.10"), review_count=3),
        tour_factory(price_adult=Decimal("80.00"), rating_average=Decimal("4.90"), review_count=3),
        tour_factory(price_adult=Decimal("300.00"), rating_average=Decimal("3.50"), review_count=40),
        tour_factory(price_adult=Decimal("55.00"), rating_average=Decimal("4.40"), review_count=0),
    )

    page = await discovery_service.get_tours(TourFilterRequest(sort=sort))

    keys = [key(t) for t in page.tours]
    assert keys == sorted(keys, reverse=reverse)


@pytest.mark.asyncio
async def test_newest_sort(discovery_service, tour_factory, seed_tours):
    older, newer = tour_factory(slug="older-one"), tour_factory(slug="newer-one")
    await seed_tours(older, newer)

    page = await discovery_service.get_tours(TourFilterRequest(sort="newest"))

    assert [t.slug for t in page.tours] == ["newer-one", "older-one"]


@pytest.mark.asyncio
async def test_unknown_sort_behaves_like_popular(discovery_service, tour_factory, seed_tours):
    await seed_tours(*(tour_factory(review_count=n) for n in (5, 50, 0, 12)))

    fallback = await discovery_service.get_tours(TourFilterRequest(sort="cheapest-first"))
    popular = await discovery_service.get_tours(TourFilterRequest(sort="popular"))

    assert [t.id for t in fallback.tours] == [t.id for t in popular.tours]
    assert [t.review_count for t in fallback.tours] == [50, 12, 5, 0]


@pytest.mark.asyncio
async def test_repeated_queries_return_the_same_order(discovery_service, tour_factory, seed_tours):
    await seed_tours(*(
        tour_factory(review_count=n % 3, rating_average=Decimal("4.00") + Decimal(n % 2) / 2)
        for n in range(12)
    ))

    for sort in ("popular", "rating", "price_asc", "newest"):
        first = await discovery_service.get_tours(TourFilterRequest(sort=sort, limit=50))
        second = await discovery_service.get_tours(TourFilterRequest(sort=sort, limit=50))

        assert [t.id for t in first.tours] == [t.id for t in second.tours]


@pytest.mark.asyncio
async def test_next_available_date_is_earliest_open_future_departure(
    discovery_service, tour_factory, schedule_factory, seed_tours
):
    tour = tour_factory(slug="scheduled")
    expected = schedule_factory(10)
    tour.schedules = [
        schedule_factory(-2),
        schedule_factory(3, ScheduleStatus.SOLD_OUT),
        schedule_factory(5, ScheduleStatus.CLOSED),
        schedule_factory(20),
        expected,
    ]
    unscheduled = tour_factory(slug="unscheduled")
    unscheduled.schedules = [schedule_factory(4, ScheduleStatus.SOLD_OUT)]
    await seed_tours(tour, unscheduled)

    page = await discovery_service.get_tours(TourFilterRequest())
    by_slug = {t.slug: t for t in page.tours}

    got = by_slug["scheduled"].next_available_date
    assert got is not None
    drift = got.replace(tzinfo=None) - expected.start_date.replace(tzinfo=None)
    assert abs(drift.total_seconds()) < 1
    assert by_slug["unscheduled"].next_available_date is None


@pytest.mark.asyncio
async def test_featured_tours_by_rating_then_reviews(discovery_service, tour_factory, seed_tours):
    """Five featured and three plain tours, asking for two."""
    await seed_tours(
        tour_factory(slug="f-top", featured=True, rating_average=Decimal("4.90"), review_count=10),
        tour_factory(slug="f-tie-more", featured=True, rating_average=Decimal("4.80"), review_count=30),
        tour_factory(slug="f-tie-less", featured=True, rating_average=Decimal("4.80"), review_count=5),
        tour_factory(slug="f-low", featured=True, rating_average=Decimal("3.00"), review_count=99),
        tour_factory(slug="f-mid", featured=True, rating_average=Decimal("4.20"), review_count=1),
        tour_factory(slug="plain-best", rating_average=Decimal("5.00"), review_count=500),
        tour_factory(slug="plain-a"),
        tour_factory(slug="plain-b"),
    )

    top_two = await discovery_service.get_featured_tours(2)
    everything = await discovery_service.get_featured_tours(10)

    assert [t.slug for t in top_two] == ["f-top", "f-tie-more"]
    assert all(t.featured for t in top_two)
    assert [t.slug for t in everything] == ["f-top", "f-tie-more", "f-tie-less", "f-mid", "f-low"]


@pytest.mark.asyncio
async def test_featured_excludes_hidden_tours(discovery_service, tour_factory, seed_tours):
    await seed_tours(
        tour_factory(slug="draft-featured", featured=True, status=TourStatus.DRAFT),
        tour_factory(slug="live-featured", featured=True),
    )

    featured = await discovery_service.get_featured_tours()

    assert [t.slug for t in featured] == ["live-featured"]


@pytest.mark.asyncio
async def test_tour_suggestions_exhaust_the_limit(discovery_service, tour_factory, seed_tours):
    """Ten matching names and two matching locations leave no room for destinations."""
    await seed_tours(
        *(tour_factory(name=f"Bali Retreat {n}", location="Ubud") for n in range(10)),
        tour_factory(name="Temple Walk", location="Bali, Indonesia"),
        tour_factory(name="Coast Drive", location="North Bali"),
    )

    suggestions = await discovery_service.get_suggestions("bali", 5)

    assert len(suggestions) == 5
    assert all(s.type == "tour" for s in suggestions)


@pytest.mark.asyncio
async def test_destinations_follow_tours(discovery_service, tour_factory, seed_tours):
    await seed_tours(
        tour_factory(name="Ha Long Bay Cruise", location="Quang Ninh, Vietnam"),
        tour_factory(name="Lantern Walk", location="Hoi An, Vietnam"),
        tour_factory(name="Old Quarter Food Tour", location="Hoi An, Vietnam"),
        tour_factory(name="Draft Hoi An", location="Hoi An Draft", status=TourStatus.DRAFT),
    )

    suggestions = await discovery_service.get_suggestions("hoi an", 10)

    types = [s.type for s in suggestions]
    assert types == ["tour"] * 2 + ["destination"]
    assert suggestions[-1].name == "Hoi An, Vietnam"
    assert {s.name for s in suggestions if s.type == "tour"} == {"Lantern Walk", "Old Quarter Food Tour"}


@pytest.mark.asyncio
async def test_destination_suggestions_are_capped_at_three(tour_factory):
    catalog = RecordingCatalog(
        [],
        refs=[TourRef(uuid4(), "Bali Retreat", "bali-retreat")],
        locations=["Bali", "North Bali", "South Bali", "East Bali"],
    )

    suggestions = await DiscoveryService(catalog).get_suggestions("bali", 10)

    assert ("distinct_locations", None, 3) in catalog.calls
    assert [s.type for s in suggestions] == ["tour", "destination", "destination", "destination"]


@pytest.mark.asyncio
async def test_suggestions_without_matches(discovery_service, tour_factory, seed_tours):
    await seed_tours(tour_factory(name="Sapa Trekking", location="Lao Cai"))

    assert await discovery_service.get_suggestions("zz") == []


@pytest.mark.asyncio
async def test_catalog_failure_propagates(tour_factory):
    service = DiscoveryService(FailingCatalog(_unsaved(tour_factory, 3)))

    with pytest.raises(OperationalError):
        await service.get_tours(TourFilterRequest())


def test_tour_item_projection(tour_factory):
    tour = tour_factory(
        id=uuid4(),
        price_adult=Decimal("199.99"),
        price_child=Decimal("99.50"),
        rating_average=Decimal("4.50"),
        difficulty=Difficulty.MODERATE,
        featured=True,
    )
    when = datetime(2026, 5, 1, 8, 0, tzinfo=timezone.utc)

    item = to_tour_item(TourListing(tour, when))

    assert item.id == str(tour.id)
    assert item.price_adult == 199.99
    assert item.price_child == 99.5
    assert item.rating_average == 4.5
    assert item.difficulty == "moderate"
    assert item.featured is True
    assert item.next_available_date == when
