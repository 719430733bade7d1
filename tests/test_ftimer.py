import time

import pytest

from syslab.ftimer import ftimer_gettod, ftimer_interval


@pytest.mark.parametrize("timer", [ftimer_gettod, ftimer_interval])
def test_runs_function_n_times(timer):
    calls = []
    result = timer(lambda: calls.append(1), 7)
    assert len(calls) == 7
    assert result >= 0


@pytest.mark.parametrize("timer", [ftimer_gettod, ftimer_interval])
def test_default_runs_ten_times(timer):
    calls = []
    timer(lambda: calls.append(1))
    assert len(calls) == 10


@pytest.mark.parametrize("timer", [ftimer_gettod, ftimer_interval])
def test_average_reflects_sleep(timer):
    result = timer(lambda: time.sleep(0.01), 3)
    assert result >= 0.009
    assert result < 1.0


@pytest.mark.parametrize("timer", [ftimer_gettod, ftimer_interval])
def test_rejects_non_positive_n(timer):
    with pytest.raises(ValueError):
        timer(lambda: None, 0)