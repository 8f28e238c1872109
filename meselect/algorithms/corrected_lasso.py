r"""
This module contains `corrected_lasso`_, which fits the lasso
with a correction for measurement error in the covariates
by projected gradient descent over a grid of $\ell_1$ radii,
as described in `Loh and Wainwright`_ and, for generalized
linear models, `Sorensen et al.`_

For the gaussian family the problem solved at radius $R$ is

.. math::

    \text{minimize}_{\|\beta\|_1 \leq R} \ \beta^T\left(\frac{1}{n}W^TW - \Sigma_{uu}\right)\beta
        - \frac{2}{n} y^TW\beta

which is non-convex whenever $W^TW/n - \Sigma_{uu}$ has negative
eigenvalues. Only convergence to a stationary point inside the
ball is guaranteed.

.. _Loh and Wainwright: http://arxiv.org/abs/1109.3714
.. _Sorensen et al.: http://arxiv.org/abs/1404.0901

"""

import warnings

import numpy as np

from ..base import (CoefficientPath,
                    check_data,
                    check_sigma_uu,
                    check_grid,
                    warm_start_path)
from ..errors import ConfigurationError, NumericalNonConvergence
from ..families import family_from_name
from .lasso import cv_lasso
from .projection import project_l1_ball

def radius_grid(W, y, family='gaussian', no_radii=20, n_folds=10, seed=None):
    """
    Default grid of radii: equally spaced between
    `1e-3 * R_max` and `R_max = 2 * ||beta_naive||_1`
    where `beta_naive` is the cross-validated lasso.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    family : str
        One of 'gaussian', 'binomial', 'poisson'.

    no_radii : int
        Length of the grid.

    Returns
    -------

    radii : np.float(no_radii)
    """
    if int(no_radii) < 1:
        raise ConfigurationError('no_radii must be a positive integer, got %s' % no_radii)

    naive = cv_lasso(W, y, family=family, n_folds=n_folds, seed=seed)
    R_max = 2 * np.fabs(naive.coef).sum()
    if R_max <= 0:
        raise ConfigurationError('naive lasso solution is identically zero, supply radii explicitly')
    return np.linspace(1.e-3 * R_max, R_max, int(no_radii))

def corrected_lasso(W,
                    y,
                    sigma_uu=None,
                    family='gaussian',
                    radii=None,
                    no_radii=20,
                    initial=None,
                    seed=None,
                    solve_args={'tol': 1.e-8, 'max_its': 500}):
    r"""
    Fit the corrected lasso along a grid of radii.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    sigma_uu : np.float((p,p)) (optional)
        Covariance of the measurement error. Defaults to zero,
        which gives the ordinary lasso in bound form.

    family : str
        One of 'gaussian', 'binomial', 'poisson'.

    radii : sequence of float (optional)
        Radii of the $\ell_1$ constraint. If None, computed by
        `radius_grid`. Sorted increasing before fitting.

    no_radii : int
        Number of radii when `radii` is None.

    initial : np.float(p) (optional)
        Starting value for the smallest radius, projected onto
        the ball. Defaults to zero.

    seed : int (optional)
        Seed for the folds of the auxiliary lasso that
        sets the default radii.

    solve_args : dict
        `tol` for the relative change in the iterate, `max_its`
        per radius and, optionally, `step` which caps the
        step size.

    Returns
    -------

    path : `CoefficientPath`
        Coefficients for each radius. `intercept` is None
        for the gaussian family.
    """
    W, y = check_data(W, y)
    n, p = W.shape
    fam = family_from_name(family)
    fam.check_response(y)
    sigma_uu = check_sigma_uu(sigma_uu, p)

    if radii is None:
        radii = radius_grid(W, y,
                            family=fam.name,
                            no_radii=no_radii,
                            n_folds=min(10, n),
                            seed=seed)
    radii = check_grid(radii, name='radii')

    tol = solve_args.get('tol', 1.e-8)
    max_its = int(solve_args.get('max_its', 500))

    L = fam.lipschitz(W, y, sigma_uu)
    step = 1. / L if L > 0 else 1.
    if 'step' in solve_args:
        step = min(step, solve_args['step'])

    if initial is None:
        beta0 = np.zeros(p)
    else:
        beta0 = np.asarray(initial, float)
        if beta0.shape != (p,):
            raise ConfigurationError('initial should have shape (%d,)' % p)

    def solve_radius(radius, start):
        return _solve_radius(W,
                             y,
                             sigma_uu,
                             fam,
                             radius,
                             start,
                             step,
                             tol,
                             max_its)

    results = warm_start_path(radii,
                              solve_radius,
                              (fam.null_intercept(y), beta0))

    intercept = np.array([r[0][0] for r in results])
    coef = np.array([r[0][1] for r in results])
    converged = np.array([r[1] for r in results])
    niter = np.array([r[2] for r in results])

    if not converged.all():
        warnings.warn('corrected lasso did not converge for %d of %d radii; '
                      'consider increasing max_its' % ((~converged).sum(), converged.shape[0]),
                      NumericalNonConvergence)

    return CoefficientPath(grid=radii,
                           coef=coef,
                           intercept=intercept if fam.intercept else None,
                           family=fam.name,
                           converged=converged,
                           niter=niter)

def _solve_radius(W, y, sigma_uu, fam, radius, start, step, tol, max_its, eps=1.e-10):
    """
    Projected gradient descent at a single radius.

    Returns
    -------

    soln : (float, np.float(p))
        Intercept and coefficients.

    converged : bool

    niter : int
    """
    intercept, beta = start
    beta = project_l1_ball(beta, radius)
    converged = False

    itercount = 0
    for itercount in range(1, max_its + 1):
        grad_intercept, grad = fam.gradient_term(W, y, beta, sigma_uu, intercept)

        if not (np.all(np.isfinite(grad)) and np.isfinite(grad_intercept)):
            # keep the last finite iterate
            break

        beta_new = project_l1_ball(beta - step * grad, radius)
        intercept_new = intercept - step * grad_intercept

        change = np.sqrt(((beta_new - beta) ** 2).sum() + (intercept_new - intercept) ** 2)
        scale = max(np.sqrt((beta ** 2).sum() + intercept ** 2), eps)
        beta, intercept = beta_new, intercept_new

        if change / scale < tol:
            converged = True
            break

    return (intercept, beta), converged, itercount
