"""
K-fold cross-validation of the corrected lasso over a grid
of radii, with the one standard error rule.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
from sklearn.model_selection import KFold

from ..base import CVResult, check_data, check_sigma_uu, check_grid
from ..errors import ConfigurationError
from ..families import family_from_name
from .corrected_lasso import corrected_lasso, radius_grid
from .lasso import _random_state

def cv_corrected_lasso(W,
                       y,
                       sigma_uu=None,
                       family='gaussian',
                       radii=None,
                       no_radii=20,
                       n_folds=10,
                       seed=None,
                       n_jobs=1,
                       solve_args={'tol': 1.e-8, 'max_its': 500}):
    r"""
    Choose the radius of the corrected lasso by K-fold
    cross-validation.

    The held-out loss of $\beta$ on a fold is the corrected
    squared error

    .. math::

        \frac{1}{n_{val}} \|y_{val} - W_{val}\beta\|^2_2 - \beta^T\Sigma_{uu}\beta.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    sigma_uu : np.float((p,p)) (optional)
        Covariance of the measurement error.

    family : str
        Only 'gaussian' is supported.

    radii : sequence of float (optional)
        Radii to compare. If None, computed once on the full
        data by `radius_grid`.

    no_radii : int
        Number of radii when `radii` is None.

    n_folds : int
        Number of folds, between 2 and n.

    seed : int (optional)
        Seed for the fold assignment. If None, numpy's
        global random state is used.

    n_jobs : int
        Number of threads fitting different folds.

    solve_args : dict
        Passed to `corrected_lasso`.

    Returns
    -------

    result : `CVResult`
    """
    W, y = check_data(W, y)
    n, p = W.shape
    fam = family_from_name(family)
    if fam.name != 'gaussian':
        raise ConfigurationError('cross-validation is only available for the gaussian family, got %s' % fam.name)
    sigma_uu = check_sigma_uu(sigma_uu, p)

    n_folds = int(n_folds)
    if n_folds < 2 or n_folds > n:
        raise ConfigurationError('n_folds must be between 2 and %d, got %s' % (n, n_folds))

    if radii is None:
        radii = radius_grid(W, y, family=fam.name, no_radii=no_radii, n_folds=n_folds, seed=seed)
    radii = check_grid(radii, name='radii')

    folds = KFold(n_splits=n_folds, shuffle=True, random_state=_random_state(seed))

    def fold_loss(split):
        train, test = split
        path = corrected_lasso(W[train],
                               y[train],
                               sigma_uu=sigma_uu,
                               family=fam.name,
                               radii=radii,
                               solve_args=solve_args)
        return np.array([fam.loss(W[test], y[test], beta, sigma_uu) for beta in path.coef])

    splits = list(folds.split(W))
    if n_jobs > 1:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            losses = np.array(list(executor.map(fold_loss, splits)))
    else:
        losses = np.array([fold_loss(split) for split in splits])

    mean_loss = losses.mean(0)
    sd_loss = losses.std(0, ddof=1)
    se_loss = sd_loss / np.sqrt(n_folds)

    idx_min = np.argmin(mean_loss)
    loss_min = mean_loss[idx_min]

    # radii are increasing, so the first radius within one
    # standard error of the minimum is the smallest
    idx_1se = np.nonzero(mean_loss <= loss_min + se_loss[idx_min])[0][0]

    return CVResult(radii=radii,
                    mean_loss=mean_loss,
                    sd_loss=sd_loss,
                    upper_1se=mean_loss + se_loss,
                    lower_1se=mean_loss - se_loss,
                    loss_min=loss_min,
                    radius_min=radii[idx_min],
                    loss_1se=mean_loss[idx_1se],
                    radius_1se=radii[idx_1se],
                    fold_loss=losses)
