"""Unit tests for parallel key partitioning."""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime

import pytest

from keyslicer.core import ConfigurationError, CountingError, PartitionerConfig
from keyslicer.keyspace import KeyQuery, get_key_array
from keyslicer.runtime.partitioning import (
    ParallelKeyPartitioner,
    PartitionAssignment,
    assign_round_robin,
    partition_symbols,
)


class TestAssignRoundRobin:
    """Test round-robin symbol distribution."""

    def test_two_partitions(self):
        """Test symbols alternate between partitions."""
        assert assign_round_robin(["a", "b", "c", "d"], 2) == [["a", "c"], ["b", "d"]]

    def test_single_partition(self):
        """Test one partition owns every symbol."""
        assert assign_round_robin(["a", "b", "c"], 1) == [["a", "b", "c"]]

    def test_more_partitions_than_symbols(self):
        """Test trailing partitions stay empty."""
        assert assign_round_robin(["a", "b"], 4) == [["a"], ["b"], [], []]

    def test_uneven_distribution(self):
        """Test leading partitions get the extra symbols."""
        partitions = assign_round_robin(list("0123456789abcdef"), 3)
        assert [len(p) for p in partitions] == [6, 5, 5]
        assert partitions[0] == ["0", "3", "6", "9", "c", "f"]

    def test_covers_every_symbol_once(self):
        """Test the partitions are disjoint and complete."""
        keys = get_key_array("base64url")
        partitions = assign_round_robin(keys, 7)
        flat = [symbol for partition in partitions for symbol in partition]
        assert sorted(flat) == sorted(keys)
        assert len(flat) == len(set(flat))

    def test_rejects_zero_parallelism(self):
        """Test parallelism must be at least 1."""
        with pytest.raises(ConfigurationError, match="parallelism must be >= 1"):
            assign_round_robin(["a"], 0)


class TestPartitionSymbols:
    """Test the concurrent count fan-out."""

    @pytest.mark.asyncio
    async def test_counts_each_partition(self):
        """Test every partition gets its own count."""
        counts = {"[ac]": 5, "[bd]": 3}

        async def count_fn(query: KeyQuery) -> int:
            return counts[query.fragment]

        result = await partition_symbols(["a", "b", "c", "d"], 2, count_fn)

        assert result == [
            PartitionAssignment(
                partition_id=0,
                symbols=("a", "c"),
                estimated_count=5,
                query=KeyQuery(keys=("a", "c")),
            ),
            PartitionAssignment(
                partition_id=1,
                symbols=("b", "d"),
                estimated_count=3,
                query=KeyQuery(keys=("b", "d")),
            ),
        ]

    @pytest.mark.asyncio
    async def test_single_failure_fails_whole_call(self):
        """Test a failing count raises CountingError with context."""

        async def count_fn(query: KeyQuery) -> int:
            if query.keys == ("b", "d"):
                raise RuntimeError("index unavailable")
            return 5

        with pytest.raises(CountingError, match="index unavailable") as exc_info:
            await partition_symbols(["a", "b", "c", "d"], 2, count_fn)

        assert exc_info.value.partition_id == 1
        assert exc_info.value.query == KeyQuery(keys=("b", "d"))
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_failure_cancels_outstanding_counts(self):
        """Test other in-flight counts are cancelled on failure."""
        cancelled: list[tuple[str, ...]] = []

        async def count_fn(query: KeyQuery) -> int:
            if query.keys == ("a",):
                raise RuntimeError("boom")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(query.keys)
                raise
            return 1

        with pytest.raises(CountingError):
            await partition_symbols(["a", "b", "c"], 3, count_fn)

        assert sorted(cancelled) == [("b",), ("c",)]

    @pytest.mark.asyncio
    async def test_empty_partitions_not_counted(self):
        """Test partitions without symbols get a zero count."""
        calls: list[KeyQuery] = []

        async def count_fn(query: KeyQuery) -> int:
            calls.append(query)
            return 2

        result = await partition_symbols(["a", "b"], 4, count_fn)

        assert len(result) == 4
        assert len(calls) == 2
        assert result[2].is_empty
        assert result[2].estimated_count == 0
        assert result[3].query is None

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        """Test no more than max_concurrency counts run at once."""
        in_flight = 0
        peak = 0

        async def count_fn(query: KeyQuery) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return 1

        result = await partition_symbols(
            get_key_array("hex-lower"), 8, count_fn, max_concurrency=3
        )

        assert len(result) == 8
        assert peak <= 3

    @pytest.mark.asyncio
    async def test_counts_run_concurrently(self):
        """Test counts overlap when the limit allows it."""
        in_flight = 0
        peak = 0

        async def count_fn(query: KeyQuery) -> int:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return 1

        await partition_symbols(get_key_array("hex-lower"), 4, count_fn, max_concurrency=4)

        assert peak == 4

    @pytest.mark.asyncio
    async def test_retries_failing_count(self):
        """Test count_retries gives a flaky count another attempt."""
        attempts = 0

        async def count_fn(query: KeyQuery) -> int:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise ConnectionError("reset")
            return 9

        result = await partition_symbols(["a"], 1, count_fn, count_retries=1, retry_delay=0)

        assert attempts == 2
        assert result[0].estimated_count == 9

    @pytest.mark.asyncio
    async def test_backoff_releases_concurrency_slot(self):
        """Test a count waiting to retry lets other partitions use its slot."""
        calls: list[str] = []

        async def count_fn(query: KeyQuery) -> int:
            calls.append(query.keys[0])
            if query.keys[0] == "a" and calls.count("a") == 1:
                raise ConnectionError("reset")
            return 1

        await partition_symbols(
            ["a", "b"], 2, count_fn, max_concurrency=1, count_retries=1, retry_delay=0.05
        )

        assert calls == ["a", "b", "a"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_count", [-1, 2.5, None, True, "3"])
    async def test_rejects_invalid_counts(self, bad_count):
        """Test counts must be non-negative integers."""

        async def count_fn(query: KeyQuery):
            return bad_count

        with pytest.raises(CountingError, match="non-negative integer"):
            await partition_symbols(["a", "b"], 1, count_fn)

    @pytest.mark.asyncio
    async def test_invalid_count_is_logged(self, caplog):
        """Test an invalid count emits the partition_count_error event."""

        async def count_fn(query: KeyQuery):
            return -5

        caplog.set_level(logging.ERROR, logger="keyslicer.runtime.partitioning")
        with pytest.raises(CountingError):
            await partition_symbols(["a"], 1, count_fn)

        errors = [r for r in caplog.records if r.getMessage() == "partition_count_error"]
        assert len(errors) == 1
        assert errors[0].partition_id == 0
        assert errors[0].error_type == "InvalidCount"
        assert "-5" in errors[0].error_message

    @pytest.mark.asyncio
    async def test_range_bounds_forwarded(self):
        """Test date bounds reach the counting function."""
        start = datetime(2024, 1, 1, tzinfo=UTC)
        end = datetime(2024, 1, 2, tzinfo=UTC)
        seen: list[KeyQuery] = []

        async def count_fn(query: KeyQuery) -> int:
            seen.append(query)
            return 0

        await partition_symbols(["a", "b"], 2, count_fn, start=start, end=end)

        assert all(q.start == start and q.end == end for q in seen)

    @pytest.mark.asyncio
    async def test_rejects_zero_concurrency(self):
        """Test max_concurrency must be at least 1."""

        async def count_fn(query: KeyQuery) -> int:
            return 0

        with pytest.raises(ConfigurationError, match="max_concurrency"):
            await partition_symbols(["a"], 1, count_fn, max_concurrency=0)


class TestParallelKeyPartitioner:
    """Test ParallelKeyPartitioner."""

    @pytest.mark.asyncio
    async def test_partition_full_alphabet(self):
        """Test one assignment per worker over the whole alphabet."""

        async def count_fn(query: KeyQuery) -> int:
            return len(query.keys) * 10

        config = PartitionerConfig(encoding="hex-lower", parallelism=4)
        partitioner = ParallelKeyPartitioner(config, count_fn)

        result = await partitioner.partition()

        assert [a.partition_id for a in result] == [0, 1, 2, 3]
        assert result[0].symbols == ("0", "4", "8", "c")
        assert result[3].symbols == ("3", "7", "b", "f")
        assert all(a.estimated_count == 40 for a in result)

    @pytest.mark.asyncio
    async def test_partition_key_range(self):
        """Test key_range restricts the partitioned symbols."""

        async def count_fn(query: KeyQuery) -> int:
            return 1

        config = PartitionerConfig(encoding="base64url", parallelism=2, key_range=["c", "a", "b"])
        partitioner = ParallelKeyPartitioner(config, count_fn)

        result = await partitioner.partition()

        assert partitioner.top_level_keys == ("a", "b", "c")
        assert result[0].symbols == ("a", "c")
        assert result[1].symbols == ("b",)

    @pytest.mark.asyncio
    async def test_partition_applies_config_retries(self):
        """Test config retry settings are used for every count."""
        attempts = 0

        async def count_fn(query: KeyQuery) -> int:
            nonlocal attempts
            attempts += 1
            raise TimeoutError("slow")

        config = PartitionerConfig(
            encoding="hex-upper", parallelism=1, count_retries=2, retry_delay=0
        )
        partitioner = ParallelKeyPartitioner(config, count_fn)

        with pytest.raises(CountingError):
            await partitioner.partition()

        assert attempts == 3

    def test_exposes_config(self):
        """Test read-only accessors."""

        async def count_fn(query: KeyQuery) -> int:
            return 0

        config = PartitionerConfig(encoding="base64", parallelism=2)
        partitioner = ParallelKeyPartitioner(config, count_fn)

        assert partitioner.config is config
        assert partitioner.encoding.value == "base64"
        assert len(partitioner.top_level_keys) == 66
