import numpy as np
import pytest
from sklearn.linear_model import Lasso

from meselect.algorithms.gmu_lasso import fit_gmu_lasso
from meselect.base import standardize
from meselect.errors import ConfigurationError
from meselect.tests.instance import measurement_error_instance as instance
from meselect.tests.decorators import set_seed_iftrue
from meselect.tests.flags import SET_SEED

@set_seed_iftrue(SET_SEED)
def test_gaussian(n=100, p=20, lagrange=0.05):

    W, y = instance(n=n, p=p, s=3)[:2]
    y = y + 1.
    path = fit_gmu_lasso(W, y,
                         lagrange=lagrange,
                         delta=[0.2, 0., 0.1],
                         family='gaussian',
                         solve_args={'tol': 1.e-10, 'max_its': 10000})
    np.testing.assert_allclose(path.grid, [0., 0.1, 0.2])
    assert path.converged.all()

    # delta=0 is the lasso on standardized columns
    Z, means, scales = standardize(W)
    lasso = Lasso(alpha=lagrange, tol=1.e-12, max_iter=100000).fit(Z, y)
    np.testing.assert_allclose(path.coef[0] * scales, lasso.coef_, atol=1.e-6)
    np.testing.assert_allclose(path.intercept[0] + path.coef[0].dot(means), lasso.intercept_, atol=1.e-6)

    l1 = np.fabs(path.coef * scales[None, :]).sum(1)
    assert np.all(np.diff(l1) <= 1.e-7)

@set_seed_iftrue(SET_SEED)
def test_binomial(n=100, p=10):

    W, y = instance(n=n, p=p, s=3, family='binomial', signal=1.)[:2]
    path = fit_gmu_lasso(W, y, delta=[0., 0.1, 0.2])
    assert path.family == 'binomial'
    assert path.lagrange > 0
    assert path.coef.shape == (3, p)
    assert path.intercept.shape == (3,)
    assert np.all(np.isfinite(path.coef))
    assert path.summary().shape == (3, 6)

@set_seed_iftrue(SET_SEED)
def test_poisson(n=100, p=10):

    W, y = instance(n=n, p=p, s=3, family='poisson', signal=0.3)[:2]
    path = fit_gmu_lasso(W, y, lagrange=0.05, family='poisson')
    np.testing.assert_allclose(path.grid, np.linspace(0, 0.5, 26))
    assert np.all(np.isfinite(path.coef))

@set_seed_iftrue(SET_SEED)
def test_bad_input(n=30, p=5):

    W, y = instance(n=n, p=p, s=2)[:2]

    with pytest.raises(ConfigurationError):
        fit_gmu_lasso(W, y, lagrange=0.1, family='gamma')

    with pytest.raises(ConfigurationError):
        fit_gmu_lasso(W, y, lagrange=0.1, family='binomial')

    with pytest.raises(ConfigurationError):
        fit_gmu_lasso(W, np.fabs(y), lagrange=0.1, delta=[-1.], family='poisson')

@set_seed_iftrue(SET_SEED)
def test_fewer_samples_than_folds(n=8, p=12):

    W = np.random.standard_normal((n, p))
    y = 3 * W[:, 0] + 0.1 * np.random.standard_normal(n)
    path = fit_gmu_lasso(W, y, delta=[0., 0.1], family='gaussian')
    assert path.lagrange > 0
    assert path.coef.shape == (2, p)
