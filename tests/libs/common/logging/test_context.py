"""Tests for run and order correlation context."""

import asyncio
import uuid

import pytest

from libs.common.logging.context import (
    LogContext,
    clear_run_id,
    generate_run_id,
    get_order_id,
    get_run_id,
    order_context,
    set_run_id,
)


class TestRunId:
    def setup_method(self) -> None:
        clear_run_id()

    def teardown_method(self) -> None:
        clear_run_id()

    def test_generate_run_id_is_uuid4(self) -> None:
        run_id = generate_run_id()

        assert uuid.UUID(run_id).version == 4
        assert generate_run_id() != run_id

    def test_set_and_clear(self) -> None:
        set_run_id("run-1")
        assert get_run_id() == "run-1"

        clear_run_id()
        assert get_run_id() is None

    def test_set_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="Run ID cannot be empty"):
            set_run_id("")


class TestLogContext:
    def teardown_method(self) -> None:
        clear_run_id()

    def test_generates_id_when_none_given(self) -> None:
        with LogContext() as run_id:
            assert get_run_id() == run_id
            assert run_id

        assert get_run_id() is None

    def test_restores_previous_run_id(self) -> None:
        set_run_id("outer")

        with LogContext("inner"):
            assert get_run_id() == "inner"

        assert get_run_id() == "outer"

    def test_restores_on_exception(self) -> None:
        with pytest.raises(RuntimeError), LogContext("run-1"):
            raise RuntimeError("boom")

        assert get_run_id() is None


class TestOrderContext:
    def test_sets_and_resets(self) -> None:
        assert get_order_id() is None

        with order_context("12345") as order_id:
            assert order_id == "12345"
            assert get_order_id() == "12345"

        assert get_order_id() is None

    def test_nested_restores_outer(self) -> None:
        with order_context("1"):
            with order_context("2"):
                assert get_order_id() == "2"
            assert get_order_id() == "1"

    @pytest.mark.asyncio()
    async def test_isolated_between_tasks(self) -> None:
        """Each asyncio task sees its own order id."""

        async def worker(order_id: str) -> str | None:
            with order_context(order_id):
                await asyncio.sleep(0)
                return get_order_id()

        results = await asyncio.gather(worker("a"), worker("b"))

        assert results == ["a", "b"]
        assert get_order_id() is None
