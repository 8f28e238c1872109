import numpy as np

from ..errors import ConfigurationError

def project_l1_ball(v, radius):
    r"""
    Euclidean projection onto the $\ell_1$ ball

    .. math::

        \{x : \|x\|_1 \leq R\}

    found by sorting $|v|$ and locating the soft-threshold
    level with a prefix sum, as in `Duchi et al.`_

    .. _Duchi et al.: https://doi.org/10.1145/1390156.1390191

    Parameters
    ----------

    v : np.float(p)
        Point to project.

    radius : float
        Radius $R \geq 0$ of the ball.

    Returns
    -------

    proj : np.float(p)
        Closest point of the ball, a copy of `v` if
        `v` is already inside.

    >>> project_l1_ball(np.array([3., -1., 0.5]), 2.)
    array([ 2., -0.,  0.])
    """
    v = np.array(v, float)
    radius = float(radius)
    if not np.isfinite(radius) or radius < 0:
        raise ConfigurationError('radius must be non-negative, got %s' % radius)

    absv = np.fabs(v)
    if absv.sum() <= radius:
        return v
    if radius == 0:
        return np.zeros_like(v)

    u = np.sort(absv)[::-1]
    cssv = np.cumsum(u) - radius
    ind = np.arange(1, u.shape[0] + 1)
    cond = u - cssv / ind > 0
    rho = ind[cond][-1]
    tau = cssv[cond][-1] / rho
    return np.sign(v) * np.maximum(absv - tau, 0)
