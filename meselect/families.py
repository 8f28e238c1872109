r"""
Response families for the corrected lasso and the MUS family of selectors.

Each family carries its mean function and derivative together
with the measurement error corrected gradient used by the
projected gradient solver in `meselect.algorithms.corrected_lasso`.
For the gaussian family the gradient is that of the corrected
quadratic loss

.. math::

    \frac{1}{n} \|y - W\beta\|^2_2 - \beta^T\Sigma_{uu}\beta.

For binomial and poisson responses no such loss exists and the
gradient is minus a corrected score: the conditional score of
`Stefanski and Carroll`_ for logistic regression and the
corrected score of `Nakamura`_ for Poisson regression.

.. _Stefanski and Carroll: https://doi.org/10.1093/biomet/74.4.703
.. _Nakamura: https://doi.org/10.1093/biomet/77.1.127

"""

import numpy as np
from scipy.special import expit, xlogy

from .errors import ConfigurationError

class family(object):

    name = None
    intercept = True

    def mean(self, eta):
        raise NotImplementedError('abstract method')

    def mean_derivative(self, eta):
        raise NotImplementedError('abstract method')

    def link(self, mu):
        raise NotImplementedError('abstract method')

    def gradient_term(self, W, y, beta, sigma_uu, intercept=0.):
        """
        Corrected gradient at (intercept, beta).

        Returns
        -------

        grad_intercept : float

        grad_beta : np.float(p)
        """
        raise NotImplementedError('abstract method')

    def deviance(self, y, eta):
        raise NotImplementedError('abstract method')

    def lipschitz(self, W, y, sigma_uu):
        """
        Upper bound on the local Lipschitz constant
        of `gradient_term`, used to pick the step size.
        """
        n = W.shape[0]
        Z = np.hstack([np.ones((n, 1)), W])
        return np.linalg.eigvalsh(Z.T.dot(Z) / n).max() * self._curvature(y)

    def check_response(self, y):
        return y

    def null_intercept(self, y):
        """
        Intercept of the model without covariates.
        """
        return float(self.link(y.mean()))

    def __repr__(self):
        return '%s()' % self.name

class gaussian(family):

    name = 'gaussian'
    intercept = False

    def mean(self, eta):
        return eta

    def mean_derivative(self, eta):
        return np.ones_like(eta)

    def link(self, mu):
        return mu

    def gradient_term(self, W, y, beta, sigma_uu, intercept=0.):
        n = W.shape[0]
        resid = y - W.dot(beta)
        return 0., -2 * W.T.dot(resid) / n - 2 * sigma_uu.dot(beta)

    def loss(self, W, y, beta, sigma_uu):
        n = W.shape[0]
        resid = y - W.dot(beta)
        return (resid ** 2).sum() / n - beta.dot(sigma_uu.dot(beta))

    def deviance(self, y, eta):
        return (y - eta) ** 2

    def lipschitz(self, W, y, sigma_uu):
        n = W.shape[0]
        Gamma = W.T.dot(W) / n - sigma_uu
        return 2 * np.fabs(np.linalg.eigvalsh(Gamma)).max()

    def null_intercept(self, y):
        return 0.

class binomial(family):

    name = 'binomial'

    def mean(self, eta):
        return expit(eta)

    def mean_derivative(self, eta):
        mu = expit(eta)
        return mu * (1 - mu)

    def link(self, mu):
        mu = np.clip(mu, 1.e-8, 1 - 1.e-8)
        return np.log(mu / (1 - mu))

    def gradient_term(self, W, y, beta, sigma_uu, intercept=0.):
        # the conditional score conditions on
        # Delta = W + y Sigma beta

        n = W.shape[0]
        Sbeta = sigma_uu.dot(beta)
        quad = beta.dot(Sbeta)
        eta = intercept + W.dot(beta) + (y - 0.5) * quad
        resid = y - self.mean(eta)
        Delta = W + np.multiply.outer(y, Sbeta)
        return -resid.mean(), -Delta.T.dot(resid) / n

    def deviance(self, y, eta):
        mu = np.clip(self.mean(eta), 1.e-12, 1 - 1.e-12)
        return -2 * (xlogy(y, mu) + xlogy(1 - y, 1 - mu))

    def _curvature(self, y):
        return 0.25

    def check_response(self, y):
        if not np.all((y == 0) | (y == 1)):
            raise ConfigurationError('binomial family expects a 0/1 response')
        return y

class poisson(family):

    name = 'poisson'

    # exp() overflows beyond this linear predictor

    max_eta = 30.

    def mean(self, eta):
        return np.exp(np.minimum(eta, self.max_eta))

    def mean_derivative(self, eta):
        return self.mean(eta)

    def link(self, mu):
        return np.log(np.maximum(mu, 1.e-8))

    def gradient_term(self, W, y, beta, sigma_uu, intercept=0.):
        n = W.shape[0]
        Sbeta = sigma_uu.dot(beta)
        quad = beta.dot(Sbeta)
        mu = self.mean(intercept + W.dot(beta) - 0.5 * quad)
        score = W.T.dot(y) - (W - Sbeta[None, :]).T.dot(mu)
        return -(y - mu).mean(), -score / n

    def deviance(self, y, eta):
        mu = self.mean(eta)
        return 2 * (xlogy(y, y) - xlogy(y, mu) - (y - mu))

    def _curvature(self, y):
        return max(1., y.max())

    def check_response(self, y):
        if np.any(y < 0):
            raise ConfigurationError('poisson family expects a non-negative response')
        return y

_families = {'gaussian': gaussian,
             'binomial': binomial,
             'poisson': poisson}

def family_from_name(name, allowed=None):
    """
    Look up a family by name.

    Parameters
    ----------

    name : str or `family`
        One of 'gaussian', 'binomial', 'poisson'.

    allowed : sequence of str (optional)
        Families supported by the caller.

    Returns
    -------

    fam : `family`
    """
    if isinstance(name, family):
        fam = name
    elif name in _families:
        fam = _families[name]()
    else:
        raise ConfigurationError("family should be one of %s, got %r" % (sorted(_families), name))

    if allowed is not None and fam.name not in allowed:
        raise ConfigurationError("family %r not supported here, use one of %s" % (fam.name, list(allowed)))
    return fam
