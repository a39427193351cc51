import pytest

from authenta.vault.progress import MIB, TransferRateEstimator, band


@pytest.mark.parametrize("start, width, percent, expected", [
    (20, 40, 0, 20),
    (20, 40, 50, 40),
    (20, 40, 100, 60),
    (60, 40, 10, 64),
])
def test_band(start, width, percent, expected):
    assert band(start, width, percent) == expected


def fake_clock(*ticks):
    times = iter(ticks)
    return lambda: next(times)


def test_speed_and_eta():
    estimator = TransferRateEstimator(2 * MIB, clock=fake_clock(0.0, 1.0))
    assert estimator.sample(50) == (1.0, 1)


def test_eta_rounds_up():
    estimator = TransferRateEstimator(3 * MIB, clock=fake_clock(0.0, 2.0))
    speed, eta = estimator.sample(50)
    assert speed == 0.75
    assert eta == 2


def test_no_elapsed_time_reports_zero():
    estimator = TransferRateEstimator(MIB, clock=fake_clock(5.0, 5.0))
    assert estimator.sample(50) == (0.0, 0)


def test_nothing_sent_reports_zero():
    estimator = TransferRateEstimator(MIB, clock=fake_clock(0.0, 3.0))
    assert estimator.sample(0) == (0.0, 0)


def test_finished_transfer_has_no_eta():
    estimator = TransferRateEstimator(MIB, clock=fake_clock(0.0, 0.5))
    assert estimator.sample(100) == (2.0, 0)
