import time
from unittest.mock import MagicMock, patch
import pytest
from ghosttrails.profiler import Profiler, get_profiler


@pytest.fixture
def profiler():
    """Returns a new Profiler instance for each test."""
    with patch("ghosttrails.profiler._profiler", None):
        yield get_profiler()


def test_get_profiler_singleton():
    """Test that get_profiler always returns the same instance."""
    assert get_profiler() is get_profiler()


def test_profiler_record(profiler):
    with profiler.record("test_op"):
        time.sleep(0.01)

    timings = profiler.get_timings()
    assert "test_op" in timings
    assert timings["test_op"] > 0.0


def test_profiler_record_survives_exceptions(profiler):
    with pytest.raises(RuntimeError):
        with profiler.record("boom"):
            raise RuntimeError("fail")
    assert "boom" in profiler.get_timings()


def test_profiler_ema_and_peak():
    p = Profiler(ema_alpha=0.5)
    p.add("stage", 0.010)
    p.add("stage", 0.030)
    assert p.get_timings()["stage"] == pytest.approx(0.020)
    assert p.peak("stage") == pytest.approx(0.030)
    assert p.peak("unknown") == 0.0


def test_profiler_window_is_bounded():
    p = Profiler(maxlen=3)
    for s in (0.5, 0.001, 0.002, 0.003):
        p.add("stage", s)
    # the 0.5s sample has rolled out of the window
    assert p.peak("stage") == pytest.approx(0.003)


def test_profiler_lines_sorted(profiler):
    profiler.add("zeta", 0.002)
    profiler.add("alpha", 0.001)
    assert profiler.lines() == ["alpha: 1.00ms", "zeta: 2.00ms"]


@patch("ghosttrails.profiler.get_logger")
def test_profiler_log_stats(mock_get_logger):
    """Test that log_stats calls the logger with the correct stats."""
    mock_logger = MagicMock()
    mock_get_logger.return_value = mock_logger

    profiler = Profiler()
    profiler.log_stats()
    mock_logger.info.assert_not_called()

    with profiler.record("log_op"):
        time.sleep(0.01)
    profiler.log_stats()

    mock_logger.info.assert_called_once()
    call_args = mock_logger.info.call_args[0][0]
    assert "log_op" in call_args
    assert "ms" in call_args
