"""Tests for CacheAsideService."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from tourcore import (
    CacheAsideService,
    CacheConfig,
    CacheTransportError,
    InMemoryCacheBackend,
    JsonSerializer,
)
from tourcore.infrastructure.backends.redis import RedisCacheBackend


@pytest.fixture
def backend(clock) -> InMemoryCacheBackend:
    return InMemoryCacheBackend(maxsize=100, default_ttl=3600.0, timer=clock)


@pytest.fixture
def service(backend: InMemoryCacheBackend) -> CacheAsideService:
    config = CacheConfig(default_ttl=timedelta(seconds=3600))
    return CacheAsideService(backend=backend, serializer=JsonSerializer(), config=config)


class TestLookup:
    """Tests for hit/miss behaviour."""

    @pytest.mark.asyncio
    async def test_miss_then_populate_then_hit(self, service: CacheAsideService) -> None:
        """Test the cache-aside cycle."""
        first = await service.lookup("tour:1")
        assert not first.hit

        await service.populate("tour:1", {"id": 1, "name": "Safari"})

        second = await service.lookup("tour:1")
        assert second.hit
        assert second.value == {"id": 1, "name": "Safari"}
        assert service.stats == {
            "hits": 1,
            "misses": 1,
            "errors": 0,
            "bypassed": 0,
            "total": 2,
        }

    @pytest.mark.asyncio
    async def test_sliding_expiration(self, service: CacheAsideService, clock) -> None:
        """Test every hit restarts the TTL."""
        await service.populate("tour:1", {"id": 1})

        clock.advance(3000)
        assert (await service.lookup("tour:1")).hit

        clock.advance(1)
        assert (await service.lookup("tour:1")).hit

        # Well past the original write's TTL; the reads kept it alive.
        clock.advance(3000)
        assert (await service.lookup("tour:1")).hit

    @pytest.mark.asyncio
    async def test_untouched_entry_expires(self, service: CacheAsideService, clock) -> None:
        """Test an entry not read for longer than its TTL is absent."""
        await service.populate("tour:1", {"id": 1})

        clock.advance(3601)

        assert not (await service.lookup("tour:1")).hit

    @pytest.mark.asyncio
    async def test_no_sliding_when_disabled(self, backend, clock) -> None:
        """Test fixed expiry when sliding expiration is off."""
        config = CacheConfig(default_ttl=timedelta(seconds=100), sliding_expiration=False)
        service = CacheAsideService(backend=backend, config=config)
        await service.populate("tour:1", {"id": 1})

        clock.advance(60)
        assert (await service.lookup("tour:1")).hit
        clock.advance(60)
        assert not (await service.lookup("tour:1")).hit

    @pytest.mark.asyncio
    async def test_disabled_cache(self, backend) -> None:
        """Test a disabled cache always misses and never writes."""
        service = CacheAsideService(backend=backend, config=CacheConfig(enabled=False))

        assert await service.populate("tour:1", {"id": 1}) is None
        assert not (await service.lookup("tour:1")).hit
        assert await backend.get("tour:1") is None

    @pytest.mark.asyncio
    async def test_undecodable_entry_is_miss(self, service, backend) -> None:
        """Test corrupt cached bytes are treated as a miss."""
        await backend.set("tour:1", b"\xff\xfe not json")

        result = await service.lookup("tour:1")

        assert not result.hit
        assert result.error is not None

    @pytest.mark.asyncio
    async def test_populate_returns_entry(self, service: CacheAsideService) -> None:
        """Test populate reports the written entry."""
        entry = await service.populate("tour:1", [1, 2], ttl=timedelta(seconds=60))
        assert entry is not None
        assert entry.key == "tour:1"
        assert entry.ttl == timedelta(seconds=60)

    @pytest.mark.asyncio
    async def test_populate_unserializable_skips(self, service, backend) -> None:
        """Test values that cannot be encoded are not cached."""
        assert await service.populate("tour:1", {"fn": object()}) is None
        assert await backend.get("tour:1") is None


class TestFailOpen:
    """Tests for cache outages."""

    @pytest.fixture
    def broken_backend(self) -> AsyncMock:
        backend = AsyncMock()
        backend.get.side_effect = CacheTransportError("connection refused")
        backend.set.side_effect = CacheTransportError("connection refused")
        backend.refresh_ttl.side_effect = CacheTransportError("connection refused")
        return backend

    @pytest.mark.asyncio
    async def test_lookup_failure_is_miss(self, broken_backend) -> None:
        """Test a transport error on lookup is reported as a miss."""
        service = CacheAsideService(backend=broken_backend)

        result = await service.lookup("tour:1")

        assert not result.hit
        assert isinstance(result.error, CacheTransportError)
        assert service.stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_get_or_compute_falls_back(self, broken_backend) -> None:
        """Test the fallback computation runs and its value is returned."""
        service = CacheAsideService(backend=broken_backend)
        compute = AsyncMock(return_value={"id": 1})

        value = await service.get_or_compute("tour:1", compute)

        assert value == {"id": 1}
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_sub_second_ttl_on_redis(self) -> None:
        """Test a sub-second TTL is cached on Redis instead of failing the call."""
        client = MagicMock()
        client.get = AsyncMock(return_value=None)
        client.setex = AsyncMock(return_value=True)
        service = CacheAsideService(backend=RedisCacheBackend(key_prefix="", client=client))
        compute = AsyncMock(return_value={"id": 1})

        value = await service.get_or_compute(
            "tour:1", compute, ttl=timedelta(milliseconds=500)
        )

        assert value == {"id": 1}
        client.setex.assert_awaited_once()
        assert client.setex.await_args.args[:2] == ("tour:1", 1)

    @pytest.mark.asyncio
    async def test_refresh_failure_still_hits(self, service, backend) -> None:
        """Test a failed TTL refresh does not turn a hit into an error."""
        await service.populate("tour:1", {"id": 1})
        backend.refresh_ttl = AsyncMock(side_effect=CacheTransportError("timeout"))

        result = await service.lookup("tour:1")

        assert result.hit
        assert service.stats["errors"] == 1

    @pytest.mark.asyncio
    async def test_slow_backend_times_out_to_miss(self) -> None:
        """Test a hanging cache call is abandoned after the operation timeout."""

        async def hang(key: str) -> bytes:
            await asyncio.sleep(10)
            return b"{}"

        backend = AsyncMock()
        backend.get.side_effect = hang
        service = CacheAsideService(backend=backend, operation_timeout=0.01)

        result = await service.lookup("tour:1")

        assert not result.hit
        assert isinstance(result.error, CacheTransportError)


class TestGetOrCompute:
    """Tests for the read-through convenience."""

    @pytest.mark.asyncio
    async def test_compute_once(self, service: CacheAsideService) -> None:
        """Test the computation is skipped on a hit."""
        compute = AsyncMock(return_value={"id": 7})

        first = await service.get_or_compute("tour:7", compute)
        second = await service.get_or_compute("tour:7", compute)

        assert first == second == {"id": 7}
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_compute_error_propagates(self, service, backend) -> None:
        """Test errors from the computation reach the caller and nothing is cached."""
        compute = AsyncMock(side_effect=LookupError("no such tour"))

        with pytest.raises(LookupError):
            await service.get_or_compute("tour:8", compute)
        assert await backend.get("tour:8") is None
