"""
Tests for the ratio computation behind performance and data profiles.
"""

import warnings

import numpy as np
import pandas as pd
import pytest

from performance_profile import (
    AllFailuresInRowError,
    EmptyInputError,
    NoSuccessfulRunsError,
    ProfileError,
    ZeroMeasurementError,
    ZeroMeasurementWarning,
    ZeroPolicy,
    compute_ratios,
    convergence_evaluations,
    data_ratios,
    failure_value,
    performance_ratios,
    simplex_gradient_budgets,
)


def test_worked_example(small_times):
    ratios, max_ratio = performance_ratios(small_times, logscale=False)

    assert max_ratio == 2.0
    np.testing.assert_array_equal(ratios, [[1, 1], [1, 1], [2, 2]])


def test_input_is_not_modified(small_times):
    times = small_times.copy()
    times[0, 0] = -1.0
    before = times.copy()

    performance_ratios(times, logscale=False)

    np.testing.assert_array_equal(times, before)


def test_best_solver_has_ratio_one():
    rng = np.random.default_rng(0)
    times = rng.uniform(0.5, 20.0, size=(30, 4))

    best = times.min(axis=1)
    ratios, max_ratio = performance_ratios(times, logscale=False)

    # Ties are practically impossible, so exactly one 1.0 per problem
    assert np.all(ratios >= 1.0)
    assert np.count_nonzero(ratios == 1.0) == times.shape[0]
    assert max_ratio == pytest.approx((times / best[:, None]).max())


def test_log_scale_best_is_zero(small_times):
    ratios, max_ratio = performance_ratios(small_times, logscale=True)

    assert max_ratio == pytest.approx(1.0)
    np.testing.assert_allclose(ratios, [[0, 0], [0, 0], [1, 1]])


def test_columns_are_sorted():
    rng = np.random.default_rng(1)
    times = rng.uniform(1.0, 100.0, size=(25, 3))
    times[rng.random(times.shape) < 0.2] = np.nan

    ratios, _ = performance_ratios(times)

    assert np.all(np.diff(ratios, axis=0) >= 0)


@pytest.mark.parametrize("failure", [-1.0, np.inf, -np.inf, np.nan])
def test_failure_becomes_sentinel(failure):
    times = np.array([[1.0, 2.0],
                      [2.0, failure],
                      [4.0, 4.0]])

    ratios, max_ratio = performance_ratios(times, logscale=False)

    assert max_ratio == 2.0
    np.testing.assert_array_equal(ratios[:, 0], [1, 1, 2])
    np.testing.assert_array_equal(ratios[:, 1], [1, 2, 4])
    assert not np.any(np.isnan(ratios))


def test_all_zero_matrix_is_shifted():
    with pytest.warns(ZeroMeasurementWarning, match="shifting all by one"):
        ratios, max_ratio = performance_ratios(np.zeros((3, 2)), logscale=False)

    assert max_ratio == 1.0
    np.testing.assert_array_equal(ratios, np.ones((3, 2)))


def test_no_warning_without_zeros(small_times):
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        performance_ratios(small_times)


def test_zero_policy_fail():
    with pytest.raises(ZeroMeasurementError):
        compute_ratios([[0.0, 1.0]], zero_policy=ZeroPolicy.FAIL)


def test_dead_row_propagates_as_failures():
    times = np.array([[1.0, 3.0],
                      [np.nan, -1.0]])

    ratios, max_ratio = performance_ratios(times, logscale=False)

    assert max_ratio == 3.0
    np.testing.assert_array_equal(ratios, [[1, 3], [6, 6]])


def test_dead_row_strict():
    times = np.array([[1.0, 3.0],
                      [np.nan, -1.0],
                      [np.inf, np.inf]])

    with pytest.raises(AllFailuresInRowError) as excinfo:
        performance_ratios(times, strict=True)
    assert excinfo.value.rows == [1, 2]


def test_every_run_failed():
    with pytest.raises(NoSuccessfulRunsError):
        performance_ratios([[np.nan, -1.0]])


@pytest.mark.parametrize("bad", [[], [[]], np.zeros((0, 3))])
def test_empty_input(bad):
    with pytest.raises(EmptyInputError):
        performance_ratios(bad)


def test_one_dimensional_input():
    with pytest.raises(ProfileError):
        performance_ratios([1.0, 2.0])


def test_dataframe_input():
    df = pd.DataFrame({"RCM": [1.0, 2.0], "METIS": [2.0, 2.0]})

    ratios, max_ratio = performance_ratios(df, logscale=False)

    assert max_ratio == 2.0
    np.testing.assert_array_equal(ratios, [[1, 1], [1, 2]])


def test_unknown_normalizer(small_times):
    with pytest.raises(ProfileError, match="normalizer"):
        compute_ratios(small_times, normalizer="worst")

##############################################################################
# Data profiles
##############################################################################

def test_data_ratios_divide_by_budget():
    evals = np.array([[3.0, 6.0],
                      [4.0, np.nan]])

    ratios, max_ratio = data_ratios(evals, simplex_gradient_budgets([2, 3]))

    assert max_ratio == 2.0
    np.testing.assert_array_equal(ratios[:, 0], [1, 1])
    np.testing.assert_array_equal(ratios[:, 1], [2, 4])


def test_data_ratios_reject_zero():
    with pytest.raises(ZeroMeasurementError):
        data_ratios([[0.0, 2.0]], [1.0])


@pytest.mark.parametrize("budgets", [None, [1.0], [1.0, 0.0], [1.0, np.inf]])
def test_data_ratios_bad_budgets(budgets):
    with pytest.raises(ProfileError):
        data_ratios([[1.0], [2.0]], budgets)


def test_simplex_gradient_budgets():
    np.testing.assert_array_equal(simplex_gradient_budgets([2, 10]), [3.0, 11.0])


def test_convergence_evaluations():
    histories = np.array([[[10.0, 5.0, 1.0, 0.5],
                           [10.0, 9.0, 8.0, np.nan]]])

    evals = convergence_evaluations(histories, tol=0.1)

    assert evals.shape == (1, 2)
    assert evals[0, 0] == 3.0
    assert np.isnan(evals[0, 1])


def test_convergence_evaluations_best_solver_converges():
    histories = np.array([[[4.0, 3.0, 2.0],
                           [4.0, 1.0, 1.0]],
                          [[8.0, 8.0, 0.0],
                           [8.0, 7.0, 6.0]]])

    evals = convergence_evaluations(histories, tol=0.0)

    np.testing.assert_array_equal(evals[0], [np.nan, 2.0])
    np.testing.assert_array_equal(evals[1], [3.0, np.nan])


def test_convergence_evaluations_shape():
    with pytest.raises(ProfileError):
        convergence_evaluations(np.ones((2, 3)))


def test_log_data_ratios_below_budget():
    evals = np.array([[1.0, np.nan],
                      [2.0, 3.0]])

    ratios, max_ratio = data_ratios(evals, [8.0, 8.0], logscale=True)

    assert max_ratio == pytest.approx(np.log2(3 / 8))
    np.testing.assert_allclose(ratios[:, 0], [-3.0, -2.0])
    # The failed run still sorts after the successful one
    np.testing.assert_allclose(ratios[:, 1], [np.log2(3 / 8), max_ratio + 1.0])
    assert np.all(np.diff(ratios, axis=0) >= 0)


def test_failure_after_tied_log_ratios():
    ratios, max_ratio = performance_ratios([[1.0, 1.0], [1.0, np.nan]])

    assert max_ratio == 0.0
    np.testing.assert_array_equal(ratios[:, 1], [0.0, 1.0])


@pytest.mark.parametrize("max_ratio, expected", [(2.0, 4.0), (0.0, 1.0), (-1.5, -0.5)])
def test_failure_value(max_ratio, expected):
    assert failure_value(max_ratio) == expected


def test_convergence_evaluations_start_from_any_solver():
    histories = np.array([[[np.nan, np.nan, np.nan],
                           [10.0, 5.0, 1.0]]])

    evals = convergence_evaluations(histories, tol=0.1)

    assert np.isnan(evals[0, 0])
    assert evals[0, 1] == 3.0


def test_convergence_evaluations_without_start():
    histories = np.array([[[4.0, 3.0], [4.0, 2.0]],
                          [[np.nan, 1.0], [np.nan, 2.0]]])

    with pytest.raises(ProfileError, match=r"\[1\]"):
        convergence_evaluations(histories)
