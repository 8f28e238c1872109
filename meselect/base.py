import functools
from typing import NamedTuple, Optional

import numpy as np, pandas as pd

from .errors import ConfigurationError

class CoefficientPath(NamedTuple):

    # grid of radii (corrected lasso) or deltas (MUS family),
    # sorted increasing

    grid : np.ndarray

    # one row of coefficients per grid point

    coef : np.ndarray
    intercept : Optional[np.ndarray]

    family : str
    converged : np.ndarray
    niter : np.ndarray

    # fixed value of lambda for the MUS family

    lagrange : Optional[float] = None

    @property
    def nonzero(self):
        """
        Number of nonzero coefficients at each grid point,
        -1 where the fit is unavailable.
        """
        counts = (np.fabs(self.coef) > 1.e-10).sum(1)
        counts[np.isnan(self.coef).any(1)] = -1
        return counts

    def summary(self):
        df = pd.DataFrame({'grid': self.grid,
                           'nonzero': self.nonzero,
                           'l1norm': np.fabs(self.coef).sum(1),
                           'converged': self.converged,
                           'niter': self.niter})
        if self.intercept is not None:
            df['intercept'] = self.intercept
        return df

class CVResult(NamedTuple):

    radii : np.ndarray

    # loss aggregated over folds

    mean_loss : np.ndarray
    sd_loss : np.ndarray
    upper_1se : np.ndarray
    lower_1se : np.ndarray

    loss_min : float
    radius_min : float
    loss_1se : float
    radius_1se : float

    # held-out loss, one row per fold

    fold_loss : np.ndarray

    def summary(self):
        return pd.DataFrame({'radius': self.radii,
                             'mean_loss': self.mean_loss,
                             'sd_loss': self.sd_loss,
                             'upper_1se': self.upper_1se,
                             'lower_1se': self.lower_1se})

def check_data(W, y):
    """
    Coerce a measurement matrix and response to float arrays
    and check that their shapes agree.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    Returns
    -------

    W, y : np.ndarray
    """
    W = np.asarray(W, float)
    y = np.asarray(y, float)

    if W.ndim != 2:
        raise ConfigurationError('W should be a 2-dimensional array, got shape %s' % (W.shape,))
    if y.ndim != 1:
        y = np.squeeze(y)
        if y.ndim != 1:
            raise ConfigurationError('y should be a vector, got shape %s' % (y.shape,))
    if W.shape[0] != y.shape[0]:
        raise ConfigurationError('W has %d rows but y has length %d' % (W.shape[0], y.shape[0]))
    if W.shape[0] == 0 or W.shape[1] == 0:
        raise ConfigurationError('empty measurement matrix')
    if not (np.all(np.isfinite(W)) and np.all(np.isfinite(y))):
        raise ConfigurationError('W and y must be finite')
    return W, y

def check_sigma_uu(sigma_uu, p, tol=1.e-8):
    """
    Validate a measurement error covariance, defaulting
    to the zero matrix (no measurement error).
    """
    if sigma_uu is None:
        return np.zeros((p, p))

    sigma_uu = np.asarray(sigma_uu, float)
    if sigma_uu.shape != (p, p):
        raise ConfigurationError('sigma_uu should have shape (%d, %d), got %s' % (p, p, sigma_uu.shape))
    if not np.all(np.isfinite(sigma_uu)):
        raise ConfigurationError('sigma_uu must be finite')
    if not np.allclose(sigma_uu, sigma_uu.T):
        raise ConfigurationError('sigma_uu is not symmetric')

    eigvals = np.linalg.eigvalsh(sigma_uu)
    if eigvals.min() < -tol * max(1, np.fabs(eigvals).max()):
        raise ConfigurationError('sigma_uu is not positive semidefinite, smallest eigenvalue %0.3e' % eigvals.min())
    return sigma_uu

def check_grid(grid, name='grid', allow_zero=False):
    """
    Return `grid` as a sorted 1-d float array, checking that it is
    non-empty, finite and positive (non-negative if `allow_zero`).
    """
    grid = np.atleast_1d(np.asarray(grid, float))
    if grid.ndim != 1 or grid.shape[0] == 0:
        raise ConfigurationError('%s should be a non-empty sequence' % name)
    if not np.all(np.isfinite(grid)):
        raise ConfigurationError('%s must be finite' % name)
    if allow_zero:
        if np.any(grid < 0):
            raise ConfigurationError('%s must be non-negative' % name)
    elif np.any(grid <= 0):
        raise ConfigurationError('%s must be strictly positive' % name)
    return np.sort(grid)

def check_nonnegative(value, name):
    value = float(value)
    if not np.isfinite(value) or value < 0:
        raise ConfigurationError('%s must be a non-negative number, got %s' % (name, value))
    return value

def standardize(W):
    """
    Center and scale the columns of W to mean 0 and standard deviation 1
    (population standard deviation). Constant columns are only centered.

    Returns
    -------

    Z : np.ndarray
        Standardized matrix.

    means, scales : np.ndarray
        Column means and scales, so that `W = Z * scales + means`.
    """
    means = W.mean(0)
    scales = W.std(0)
    scales[scales == 0] = 1.
    return (W - means[None, :]) / scales[None, :], means, scales

def unstandardize(theta, means, scales):
    """
    Map (intercept, coefficients) fitted on `[1, standardize(W)]`
    back to the scale of W. Rows of `theta` are grid points.
    """
    theta = np.atleast_2d(theta)
    coef = theta[:, 1:] / scales[None, :]
    intercept = theta[:, 0] - coef.dot(means)
    return intercept, coef

def warm_start_path(grid, solve_point, initial):
    """
    Solve along an ordered grid, starting each point at
    the solution of the previous one.

    Parameters
    ----------

    grid : sequence
        Ordered grid values.

    solve_point : callable
        Called as `solve_point(value, start)`, returns a tuple
        whose first entry is the solution used as the next start.

    initial : object
        Starting value for the first grid point.

    Returns
    -------

    results : list
        Output of `solve_point` for each value of the grid.
    """
    def _step(carry, value):
        results, start = carry
        result = solve_point(value, start)
        return results + [result], result[0]

    return functools.reduce(_step, grid, ([], initial))[0]
