"""
The GMU lasso: the lasso equivalent of the generalized matrix
uncertainty selector, fit by coordinate descent inside iteratively
reweighted least squares and swept over a grid of delta with
warm starts.
"""

import warnings

import numpy as np

from ..base import (CoefficientPath,
                    check_data,
                    check_grid,
                    check_nonnegative,
                    standardize,
                    unstandardize,
                    warm_start_path)
from ..errors import NumericalNonConvergence
from ..families import family_from_name
from .lasso import cv_lasso
from .mu_lasso import irls_mu_lasso

def fit_gmu_lasso(W,
                  y,
                  lagrange=None,
                  delta=None,
                  family='binomial',
                  solve_args={'tol': 1.e-7, 'max_its': 1000},
                  irls_args={'tol': 1.e-7, 'max_its': 100}):
    r"""
    Fit the GMU lasso over a grid of delta.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    lagrange : float (optional)
        Value of $\lambda$. If None, chosen by `cv_lasso`.

    delta : sequence of float (optional)
        Non-negative values of $\delta$, defaults to
        `0, 0.02, ..., 0.5`. Sorted increasing; each value
        starts from the solution at the previous one.

    family : str
        One of 'binomial', 'poisson' or 'gaussian'.

    solve_args : dict
        Coordinate descent tolerance and sweeps.

    irls_args : dict
        Reweighting tolerance and iterations.

    Returns
    -------

    path : `CoefficientPath`
        Coefficients on the scale of `W`.
    """
    W, y = check_data(W, y)
    n, p = W.shape
    fam = family_from_name(family)
    fam.check_response(y)

    if lagrange is None:
        lagrange = cv_lasso(W, y, family=fam.name, n_folds=min(10, n)).lagrange
    lagrange = check_nonnegative(lagrange, 'lagrange')

    if delta is None:
        delta = np.linspace(0, 0.5, 26)
    delta = check_grid(delta, name='delta', allow_zero=True)

    Z, means, scales = standardize(W)
    Z1 = np.hstack([np.ones((n, 1)), Z])

    initial = np.zeros(p + 1)
    initial[0] = fam.null_intercept(y) if fam.name != 'gaussian' else y.mean()

    def solve_delta(value, start):
        return irls_mu_lasso(Z1,
                             y,
                             lagrange,
                             value,
                             fam,
                             start,
                             solve_args=solve_args,
                             irls_args=irls_args)

    results = warm_start_path(delta, solve_delta, initial)

    theta = np.array([r[0] for r in results])
    converged = np.array([r[1] for r in results])
    niter = np.array([r[2] for r in results])

    if not converged.all():
        warnings.warn('GMU lasso did not converge for %d of %d values of delta' % ((~converged).sum(), converged.shape[0]),
                      NumericalNonConvergence)

    intercept, coef = unstandardize(theta, means, scales)
    return CoefficientPath(grid=delta,
                           coef=coef,
                           intercept=intercept,
                           family=fam.name,
                           converged=converged,
                           niter=niter,
                           lagrange=lagrange)
