r"""
Cross-validated lasso used to seed the other fits: it
supplies $\lambda$ for the MUS family and the naive
estimate that sets the largest radius of the corrected lasso.

The value of $\lambda$ is reported on the glmnet scale: the
lasso is fit to standardized columns with the loss normalized
by the sample size,

.. math::

    \text{minimize}_{\beta_0, \beta} \ -\frac{1}{n} \ell(\beta_0, \beta) + \lambda \|\beta\|_1

(for the gaussian family $-\ell$ is half the residual sum of squares).
"""

from typing import NamedTuple

import numpy as np
import sklearn
from sklearn.linear_model import LassoCV, LogisticRegressionCV
from sklearn.model_selection import KFold
from sklearn.utils.fixes import parse_version

from ..base import check_data, standardize, unstandardize, warm_start_path
from ..errors import ConfigurationError, ExternalSolverFailure
from ..families import family_from_name
from .mu_lasso import irls_mu_lasso

class NaiveLasso(NamedTuple):

    lagrange : float
    coef : np.ndarray
    intercept : float

def cv_lasso(W, y, family='gaussian', n_folds=10, seed=None):
    r"""
    Lasso with $\lambda$ chosen by K-fold cross-validation
    (the value minimizing the held-out loss).

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    family : str
        One of 'gaussian', 'binomial', 'poisson'.

    n_folds : int
        Number of folds.

    seed : int (optional)
        Seed for the fold assignment. If None, numpy's
        global random state is used.

    Returns
    -------

    naive : `NaiveLasso`
        Chosen $\lambda$ and the lasso fit at that value,
        on the scale of `W`.
    """
    W, y = check_data(W, y)
    fam = family_from_name(family)
    fam.check_response(y)
    n, p = W.shape
    if n_folds < 2 or n_folds > n:
        raise ConfigurationError('n_folds must be between 2 and %d, got %s' % (n, n_folds))

    Z, means, scales = standardize(W)
    folds = KFold(n_splits=n_folds, shuffle=True, random_state=_random_state(seed))

    try:
        if fam.name == 'gaussian':
            fit = LassoCV(cv=folds, fit_intercept=True).fit(Z, y)
            lagrange = fit.alpha_
            theta = np.hstack([fit.intercept_, fit.coef_])
        elif fam.name == 'binomial':
            lagrange, theta = _cv_logistic_lasso(Z, y, folds)
        else:
            lagrange, theta = _cv_glm_lasso(Z, y, fam, folds)
    except (ValueError, FloatingPointError, np.linalg.LinAlgError) as e:
        raise ExternalSolverFailure('auxiliary lasso failed: %s' % e) from e

    intercept, coef = unstandardize(theta, means, scales)
    return NaiveLasso(lagrange=float(lagrange),
                      coef=coef[0],
                      intercept=float(intercept[0]))

def glm_lasso_path(Z, y, lagranges, family):
    """
    Lasso path for a GLM with an unpenalized intercept in
    the first column of `Z`, warm started along `lagranges`.
    """
    initial = np.zeros(Z.shape[1])
    initial[0] = family.null_intercept(y)

    def solve_point(lagrange, start):
        return irls_mu_lasso(Z, y, lagrange, 0., family, start)

    return [r[0] for r in warm_start_path(lagranges, solve_point, initial)]

def _lagrange_grid(Z, y, nlagrange=30, ratio=1.e-2):
    # geometric grid down from the smallest lambda with a zero solution
    n = Z.shape[0]
    lagrange_max = np.fabs(Z.T.dot(y - y.mean())).max() / n
    if lagrange_max == 0:
        raise ValueError('response is uncorrelated with every column')
    return lagrange_max * np.logspace(0, np.log10(ratio), nlagrange)

def _cv_logistic_lasso(Z, y, folds, nlagrange=30, ratio=1.e-2):
    n = Z.shape[0]
    lagranges = _lagrange_grid(Z, y, nlagrange, ratio)

    # scikit-learn penalizes ||beta||_1 + C * sum of losses,
    # so C = 1 / (n * lagrange) on the glmnet scale

    cv_args = dict(Cs=1. / (n * lagranges),
                   cv=folds,
                   l1_ratios=[1.],
                   solver='saga',
                   scoring='neg_log_loss',
                   tol=1.e-6,
                   max_iter=10000,
                   random_state=0)
    # older releases only honour l1_ratios under the elastic net penalty
    if parse_version(sklearn.__version__) < parse_version('1.8'):
        cv_args['penalty'] = 'elasticnet'
    fit = LogisticRegressionCV(**cv_args).fit(Z, y.astype(int))

    lagrange = 1. / (n * fit.C_[0])
    return lagrange, np.hstack([fit.intercept_[0], fit.coef_[0]])

def _cv_glm_lasso(Z, y, family, folds, nlagrange=30, ratio=1.e-2):
    n = Z.shape[0]
    Z1 = np.hstack([np.ones((n, 1)), Z])
    lagranges = _lagrange_grid(Z, y, nlagrange, ratio)

    deviance = []
    for train, test in folds.split(Z1):
        path = glm_lasso_path(Z1[train], y[train], lagranges, family)
        deviance.append([family.deviance(y[test], Z1[test].dot(theta)).mean() for theta in path])
    best = np.argmin(np.mean(deviance, 0))

    theta = glm_lasso_path(Z1, y, lagranges[:best + 1], family)[-1]
    return lagranges[best], theta

def _random_state(seed):
    # KFold(random_state=None) reshuffles on every call to split(),
    # fix a single draw from numpy's global state instead
    if seed is None:
        return np.random.randint(2**31 - 1)
    return seed
