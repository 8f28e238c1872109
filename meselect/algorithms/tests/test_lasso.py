import numpy as np
import pytest
from sklearn.linear_model import LassoCV
from sklearn.model_selection import KFold

import meselect.algorithms.lasso as lasso_module
from meselect.algorithms.lasso import cv_lasso, glm_lasso_path
from meselect.base import standardize
from meselect.errors import ConfigurationError, ExternalSolverFailure
from meselect.families import binomial
from meselect.tests.instance import measurement_error_instance as instance
from meselect.tests.decorators import set_seed_iftrue
from meselect.tests.flags import SET_SEED

@set_seed_iftrue(SET_SEED)
def test_gaussian(n=100, p=20):

    W, y = instance(n=n, p=p, s=3, signal=1.)[:2]
    naive = cv_lasso(W, y, n_folds=5, seed=4)

    Z, means, scales = standardize(W)
    fit = LassoCV(cv=KFold(n_splits=5, shuffle=True, random_state=4)).fit(Z, y)
    np.testing.assert_allclose(naive.lagrange, fit.alpha_)
    np.testing.assert_allclose(naive.coef, fit.coef_ / scales)
    np.testing.assert_allclose(naive.intercept + W.dot(naive.coef), fit.predict(Z))
    assert np.fabs(naive.coef).sum() > 0

@set_seed_iftrue(SET_SEED)
def test_glm(n=100, p=10):

    for family, signal in [('binomial', 1.), ('poisson', 0.3)]:
        W, y = instance(n=n, p=p, s=3, family=family, signal=signal)[:2]
        naive = cv_lasso(W, y, family=family, n_folds=5, seed=1)
        assert naive.lagrange > 0
        assert naive.coef.shape == (p,)
        assert np.all(np.isfinite(naive.coef))

        again = cv_lasso(W, y, family=family, n_folds=5, seed=1)
        np.testing.assert_allclose(naive.coef, again.coef)

@set_seed_iftrue(SET_SEED)
def test_glm_lasso_path(n=100, p=10):

    W, y = instance(n=n, p=p, s=3, family='binomial', signal=1.)[:2]
    Z = np.hstack([np.ones((n, 1)), standardize(W)[0]])
    lagranges = [0.2, 0.05, 0.01]
    path = glm_lasso_path(Z, y, lagranges, binomial())
    assert len(path) == 3

    l1 = [np.fabs(theta[1:]).sum() for theta in path]
    assert l1[0] <= l1[1] <= l1[2]

@set_seed_iftrue(SET_SEED)
def test_failures(monkeypatch, n=30, p=5):

    W, y = instance(n=n, p=p, s=2)[:2]

    for n_folds in [1, n + 1]:
        with pytest.raises(ConfigurationError):
            cv_lasso(W, y, n_folds=n_folds)

    class failing_lasso(object):

        def __init__(self, **kwargs):
            pass

        def fit(self, X, y):
            raise ValueError('solver blew up')

    monkeypatch.setattr(lasso_module, 'LassoCV', failing_lasso)
    with pytest.raises(ExternalSolverFailure):
        cv_lasso(W, y)

@set_seed_iftrue(SET_SEED)
def test_logistic_scale(monkeypatch, n=50, p=5):
    """
    The penalty chosen for binomial responses is
    reported on the glmnet scale.
    """
    W, y = instance(n=n, p=p, s=2, family='binomial', signal=1.)[:2]
    calls = []

    class fixed_logistic(object):

        def __init__(self, **kwargs):
            calls.append(kwargs)

        def fit(self, X, y):
            self.C_ = np.array([calls[-1]['Cs'][3]])
            self.coef_ = np.ones((1, X.shape[1]))
            self.intercept_ = np.array([0.5])
            return self

    monkeypatch.setattr(lasso_module, 'LogisticRegressionCV', fixed_logistic)
    naive = cv_lasso(W, y, family='binomial', n_folds=5, seed=0)

    assert list(calls[0]['l1_ratios']) == [1.]
    Cs = calls[0]['Cs']
    np.testing.assert_allclose(naive.lagrange, 1. / (n * Cs[3]))

    # the grid starts at the smallest penalty with a zero solution
    Z = standardize(W)[0]
    np.testing.assert_allclose(1. / (n * Cs[0]), np.fabs(Z.T.dot(y - y.mean())).max() / n)

    scales = standardize(W)[2]
    np.testing.assert_allclose(naive.coef, 1. / scales)
