import numpy as np

from ..families import family_from_name

_cov_cache = {}

def _design(n, p, rho, equicorrelated):
    """
    Create an equicorrelated or AR(1) design.
    """
    if equicorrelated:
        X = (np.sqrt(1 - rho) * np.random.standard_normal((n, p)) +
             np.sqrt(rho) * np.random.standard_normal(n)[:, None])
        sigmaX = (1 - rho) * np.identity(p) + rho * np.ones((p, p))
    else:
        if ('AR1', p, rho) not in _cov_cache:
            idx = np.arange(p)
            cov = rho ** np.abs(np.subtract.outer(idx, idx))
            _cov_cache[('AR1', p, rho)] = cov, np.linalg.cholesky(cov)
        sigmaX, cholX = _cov_cache[('AR1', p, rho)]
        X = np.random.standard_normal((n, p)).dot(cholX.T)
    return X, sigmaX

def _noise_root(sigma_uu):
    # symmetric square root, works for singular covariances
    eigvals, eigvecs = np.linalg.eigh(sigma_uu)
    return eigvecs * np.sqrt(np.maximum(eigvals, 0))[None, :]

def measurement_error_instance(n=100,
                               p=50,
                               s=5,
                               sigma=1.,
                               sigma_uu=0.2,
                               family='gaussian',
                               rho=0.,
                               signal=1.,
                               random_signs=False,
                               equicorrelated=True):
    r"""
    A testing instance for regression with measurement error:
    the response depends on $X$ but only $W = X + U$ is observed,
    with the rows of $U$ independent $N(0, \Sigma_{uu})$.

    Parameters
    ----------

    n : int
        Sample size

    p : int
        Number of features

    s : int
        True sparsity

    sigma : float
        Noise level (gaussian family only).

    sigma_uu : float or np.float((p,p))
        Measurement error covariance. A float is taken
        as a multiple of the identity.

    family : str
        One of 'gaussian', 'binomial', 'poisson'.

    rho : float
        Correlation of the design (must be in interval [0,1])

    signal : float or (float, float)
        Sizes for the coefficients. If a tuple -- then coefficients
        are equally spaced between these values using np.linspace.

    random_signs : bool
        If true, assign random signs to coefficients.
        Else they are all positive.

    equicorrelated: bool
        If true, design in equi-correlated,
        Else design is AR.

    Returns
    -------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    beta : np.float(p)
        True coefficients.

    active : np.int(s)
        Non-zero pattern.

    sigma_uu : np.float((p,p))
        Measurement error covariance.

    X : np.float((n,p))
        Covariates measured without error.
    """
    fam = family_from_name(family)

    X = _design(n, p, rho, equicorrelated)[0]

    sigma_uu = np.asarray(sigma_uu, float)
    if sigma_uu.ndim == 0:
        sigma_uu = sigma_uu * np.identity(p)
    W = X + np.random.standard_normal((n, p)).dot(_noise_root(sigma_uu).T)

    beta = np.zeros(p)
    signal = np.atleast_1d(signal)
    if signal.shape == (1,):
        beta[:s] = signal[0]
    else:
        beta[:s] = np.linspace(signal[0], signal[1], s)
    if random_signs:
        beta[:s] *= (2 * np.random.binomial(1, 0.5, size=(s,)) - 1.)
    np.random.shuffle(beta)

    eta = X.dot(beta)
    if fam.name == 'gaussian':
        y = eta + sigma * np.random.standard_normal(n)
    elif fam.name == 'binomial':
        y = np.random.binomial(1, fam.mean(eta)).astype(float)
    else:
        y = np.random.poisson(fam.mean(eta)).astype(float)

    return W, y, beta, np.nonzero(beta)[0], sigma_uu, X
