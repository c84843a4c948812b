"""Tests for InMemoryRecordStore."""

from datetime import datetime, timedelta, timezone

import pytest

from tourcore.core.entities.lifecycle import LifecycleRecord, RecordFilter, TourStatus
from tourcore.exceptions import RecordNotFoundError, RecordStoreError
from tourcore.infrastructure.stores.memory import InMemoryRecordStore

T0 = datetime(2025, 6, 1, tzinfo=timezone.utc)


def make_tour(tour_id: int, status: TourStatus) -> LifecycleRecord:
    return LifecycleRecord(
        id=tour_id,
        status=status,
        start_time=T0,
        end_time=T0 + timedelta(days=3),
        name=f"Tour {tour_id}",
    )


class TestInMemoryRecordStore:
    """Tests for InMemoryRecordStore."""

    @pytest.fixture
    def store(self) -> InMemoryRecordStore:
        return InMemoryRecordStore(
            [
                make_tour(1, TourStatus.UPCOMING),
                make_tour(2, TourStatus.ONGOING),
                make_tour(3, TourStatus.COMPLETED),
                make_tour(4, TourStatus.CANCELLED),
            ]
        )

    @pytest.mark.asyncio
    async def test_find_many_filters_by_status(self, store: InMemoryRecordStore) -> None:
        """Test only records with candidate statuses are returned."""
        record_filter = RecordFilter.for_statuses([TourStatus.UPCOMING, TourStatus.ONGOING])

        records = await store.find_many(record_filter)

        assert sorted(r.id for r in records) == [1, 2]

    @pytest.mark.asyncio
    async def test_filter_accepts_plain_strings(self, store: InMemoryRecordStore) -> None:
        """Test records holding plain string statuses still match."""
        await store.add(make_tour(5, "UPCOMING"))  # type: ignore[arg-type]
        records = await store.find_many(RecordFilter.for_statuses([TourStatus.UPCOMING]))
        assert sorted(r.id for r in records) == [1, 5]

    @pytest.mark.asyncio
    async def test_update(self, store: InMemoryRecordStore) -> None:
        """Test a partial update replaces only the given fields."""
        updated = await store.update(1, {"status": "ONGOING"})

        assert updated.status == "ONGOING"
        assert updated.name == "Tour 1"
        assert store.get(1) == updated

    @pytest.mark.asyncio
    async def test_update_missing(self, store: InMemoryRecordStore) -> None:
        """Test updating an unknown id raises RecordNotFoundError."""
        with pytest.raises(RecordNotFoundError) as exc_info:
            await store.update(99, {"status": "ONGOING"})
        assert exc_info.value.record_id == 99

    @pytest.mark.asyncio
    async def test_update_unknown_field(self, store: InMemoryRecordStore) -> None:
        """Test the id and unknown fields cannot be written."""
        with pytest.raises(RecordStoreError):
            await store.update(1, {"id": 7})
        with pytest.raises(RecordStoreError):
            await store.update(1, {"colour": "red"})

    @pytest.mark.asyncio
    async def test_increment_counter(self, store: InMemoryRecordStore) -> None:
        """Test a counter in the extra fields is adjusted in place."""
        await store.add(make_tour(5, TourStatus.UPCOMING).with_fields(extra={"guests_booked": 6}))

        updated = await store.increment(5, "guests_booked", -2)

        assert updated.extra == {"guests_booked": 4}
        assert store.get(5).extra["guests_booked"] == 4

    @pytest.mark.asyncio
    async def test_increment_missing_record(self, store: InMemoryRecordStore) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.increment(99, "guests_booked", -1)

    @pytest.mark.asyncio
    async def test_increment_requires_numeric_counter(self, store: InMemoryRecordStore) -> None:
        """Test missing or non-numeric counters are rejected."""
        with pytest.raises(RecordStoreError):
            await store.increment(1, "guests_booked", 1)

        await store.add(make_tour(6, TourStatus.UPCOMING).with_fields(extra={"guests_booked": "x"}))
        with pytest.raises(RecordStoreError):
            await store.increment(6, "guests_booked", 1)
