"""
Unit tests for Result helpers, StateCell and the exception hierarchy
"""
import pytest

from app.core.exceptions import ErrorCode, LandmarkClientError, TransportError
from app.core.metrics import get_metrics_snapshot, record_latency, reset_metrics
from app.core.result import Failure, Success, map_result, unknown_variant, unwrap_or
from app.core.state import StateCell


class TestResult:

    def test_map_result(self):
        assert map_result(Success(2), lambda v: v * 10) == Success(20)
        failure = Failure("nope")
        assert map_result(failure, lambda v: v * 10) is failure

    def test_unwrap_or(self):
        assert unwrap_or(Success([1]), []) == [1]
        assert unwrap_or(Failure("nope"), []) == []

    def test_unknown_variant_is_rejected(self):
        with pytest.raises(TypeError, match="str"):
            unwrap_or("not a result", None)
        assert isinstance(unknown_variant(object()), TypeError)

    def test_flags(self):
        assert Success(None).is_success
        assert not Failure("x").is_success


class TestStateCell:

    def test_subscribers_see_every_value_in_order(self):
        cell = StateCell(0)
        first, second = [], []
        cell.subscribe(first.append)
        cell.subscribe(second.append)

        cell.set(1)
        cell.set(2)

        assert cell.value == 2
        assert first == [1, 2]
        assert second == [1, 2]

    def test_failing_subscriber_does_not_block_others(self):
        cell = StateCell("a")
        seen = []

        def broken(value):
            raise RuntimeError("subscriber bug")

        cell.subscribe(broken)
        cell.subscribe(seen.append)
        cell.set("b")

        assert seen == ["b"]
        assert cell.value == "b"

    def test_unsubscribe_is_idempotent(self):
        cell = StateCell(0)
        seen = []
        unsubscribe = cell.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        cell.set(5)
        assert seen == []


class TestTransportError:

    def test_from_status(self):
        error = TransportError.from_status(503, "Service Unavailable")
        assert error.message == "HTTP 503: Service Unavailable"
        assert error.status_code == 503
        assert error.error_code == ErrorCode.HTTP_ERROR
        assert isinstance(error, LandmarkClientError)

    def test_network_error_has_no_status(self):
        error = TransportError("Network error: unreachable")
        assert error.status_code is None
        assert error.error_code == ErrorCode.NETWORK_ERROR


class TestMetrics:

    def setup_method(self):
        reset_metrics()

    def test_calls_and_failures_are_counted(self):
        with record_latency("api.get"):
            pass
        with pytest.raises(RuntimeError):
            with record_latency("api.get"):
                raise RuntimeError("down")

        snapshot = get_metrics_snapshot()["api.get"]
        assert snapshot["calls"] == 2
        assert snapshot["failures"] == 1
        assert snapshot["max_ms"] >= snapshot["avg_ms"] >= 0.0

    def test_reset(self):
        with record_latency("api.post"):
            pass
        reset_metrics()
        assert get_metrics_snapshot() == {}
