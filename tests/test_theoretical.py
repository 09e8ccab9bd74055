import pytest
from numpy.testing import assert_almost_equal
from utils import theoretical
from utils.ieee_802_11 import DcfTiming
from utils.theoretical import TheoreticalSolver, SolverNotConverged


def test_converges_for_ten_stations():
    tao, p_success = TheoreticalSolver().calculate(10, 32, 4)
    assert 0 < tao < 1
    assert 0 < p_success < 1
    # the returned success probability is the one implied by the returned tao
    assert_almost_equal(p_success, (1 - tao) ** 9, decimal=12)


def test_known_fixed_point():
    tao, p_success = TheoreticalSolver(tolerance=1e-12).calculate(10, 32, 4)
    p = 1 - p_success
    denominator = 1 + 32 + p * 32 * (1 - (2 * p) ** 4) / (1 - 2 * p)
    assert_almost_equal(tao, 2 / denominator, decimal=9)


def test_single_station_always_succeeds():
    tao, p_success = TheoreticalSolver().calculate(1, 32, 4)
    assert p_success == 1.0
    assert_almost_equal(tao, 2 / 33, decimal=4)


def test_half_probability_is_substituted():
    assert TheoreticalSolver.denominator(0.5, 32, 4) == 1 + 32 + 4 * 32 * 0.5
    assert_almost_equal(TheoreticalSolver.denominator(0.5 + 1e-9, 32, 4), 97, decimal=4)
    assert_almost_equal(TheoreticalSolver.denominator(0.5 - 1e-9, 32, 4), 97, decimal=4)


def test_no_backoff_stages():
    tao, _ = TheoreticalSolver().calculate(5, 16, 0)
    assert_almost_equal(tao, 2 / 17)


def test_more_stations_lower_success():
    _, few = TheoreticalSolver().calculate(10, 32, 4)
    _, many = TheoreticalSolver().calculate(50, 32, 4)
    assert many < few


def test_large_networks_converge_with_defaults():
    for n in (30, 40, 50):
        tao, p_success = TheoreticalSolver().calculate(n, 32, 4)
        assert 0 < tao < 1
        assert 0 < p_success < 1
        assert_almost_equal(p_success, (1 - tao) ** (n - 1), decimal=12)

    tao, p_success = TheoreticalSolver().calculate(50, 32, 4)
    assert_almost_equal(tao, 0.0167, decimal=3)
    assert_almost_equal(p_success, 0.437, decimal=2)


def test_plain_iteration_oscillates_for_large_networks():
    with pytest.raises(SolverNotConverged):
        TheoreticalSolver(relaxation=0.0).calculate(50, 32, 4)


def test_relaxation_reaches_same_fixed_point():
    plain = TheoreticalSolver(tolerance=1e-10, relaxation=0.0).calculate(10, 32, 4)
    damped = TheoreticalSolver(tolerance=1e-10, relaxation=0.5).calculate(10, 32, 4)
    assert_almost_equal(plain, damped, decimal=6)


def test_iteration_cap():
    with pytest.raises(SolverNotConverged) as info:
        TheoreticalSolver(max_iterations=1).calculate(10, 32, 4)
    assert info.value.iterations == 1
    assert isinstance(info.value, RuntimeError)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        TheoreticalSolver().calculate(0, 32, 4)
    with pytest.raises(ValueError):
        TheoreticalSolver().calculate(10, 0, 4)
    with pytest.raises(ValueError):
        TheoreticalSolver().calculate(10, 32, -1)
    with pytest.raises(ValueError):
        TheoreticalSolver(tolerance=0)
    with pytest.raises(ValueError):
        TheoreticalSolver(relaxation=1.0)


def test_module_level_calculate():
    assert theoretical.calculate(10, 32, 4) == TheoreticalSolver().calculate(10, 32, 4)


def test_saturation_throughput_single_station():
    timing = DcfTiming()
    tao = 2 / 33
    busy = timing.data_frame + timing.propagation_delay + timing.success_deferral(False)
    expected = tao * timing.payload_bits / ((1 - tao) * timing.slot + tao * busy)
    assert_almost_equal(TheoreticalSolver.saturation_throughput(1, tao, timing), expected)


def test_saturation_throughput_bounds():
    timing = DcfTiming()
    tao, _ = TheoreticalSolver().calculate(10, 32, 4)
    basic = TheoreticalSolver.saturation_throughput(10, tao, timing)
    rts_cts = TheoreticalSolver.saturation_throughput(10, tao, timing, use_rts_cts=True)
    assert 0 < basic < 1
    assert 0 < rts_cts < 1
    assert TheoreticalSolver.saturation_throughput(10, 0.0, timing) == 0.0
