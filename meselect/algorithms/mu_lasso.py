r"""
Coordinate descent for the lasso equivalent of the
matrix uncertainty selector

.. math::

    \text{minimize}_{\beta} \ \frac{1}{2n} \|z - W\beta\|^2_2 + \lambda \|\beta\|_1
        + \frac{\delta}{2} \|\beta\|_1^2

whose KKT conditions are the MUS constraints

.. math::

    \frac{1}{n} \left|W_j^T(z - W\beta)\right| \leq \lambda + \delta \|\beta\|_1

with equality on the support of $\beta$. Generalized linear
models are handled by iteratively reweighted least squares
around the coordinate descent, as in the GMU lasso of
`Sorensen et al.`_

.. _Sorensen et al.: http://arxiv.org/abs/1606.03944

"""

import numpy as np

def soft_threshold(value, threshold):
    return np.sign(value) * max(np.fabs(value) - threshold, 0)

def mu_lasso(W,
             z,
             lagrange,
             delta,
             initial=None,
             intercept=False,
             active_set=True,
             solve_args={'tol': 1.e-7, 'max_its': 1000}):
    r"""
    Cyclic coordinate descent for a single (lambda, delta).

    Parameters
    ----------

    W : np.float((n,p))
        Design matrix. If `intercept`, the first column is
        left unpenalized.

    z : np.float(n)
        Response.

    lagrange : float
        Value of $\lambda$.

    delta : float
        Value of $\delta$.

    initial : np.float(p) (optional)
        Warm start.

    active_set : bool
        Cycle over the nonzero coordinates between full sweeps.

    solve_args : dict
        `tol` on the largest coordinate change of a full
        sweep and `max_its` full sweeps.

    Returns
    -------

    beta : np.float(p)

    converged : bool

    niter : int
        Number of full sweeps.
    """
    n, p = W.shape
    tol = solve_args.get('tol', 1.e-7)
    max_its = int(solve_args.get('max_its', 1000))

    beta = np.zeros(p) if initial is None else np.array(initial, float)
    resid = z - W.dot(beta)
    colsq = (W ** 2).sum(0) / n

    penalized = np.ones(p, bool)
    if intercept:
        penalized[0] = False

    # running l1 norm of the penalized coordinates

    state = {'l1': np.fabs(beta[penalized]).sum()}

    def update(j):
        if colsq[j] == 0:
            return 0.
        old = beta[j]
        c = W[:, j].dot(resid) / n + colsq[j] * old
        if penalized[j]:
            l1_others = state['l1'] - np.fabs(old)
            new = soft_threshold(c, lagrange + delta * l1_others) / (colsq[j] + delta)
            state['l1'] = l1_others + np.fabs(new)
        else:
            new = c / colsq[j]
        if new != old:
            resid[:] -= W[:, j] * (new - old)
            beta[j] = new
        return np.fabs(new - old)

    converged = False
    niter = 0
    for niter in range(1, max_its + 1):
        max_change = max([update(j) for j in range(p)])
        if max_change < tol:
            converged = True
            break

        if active_set:
            active = np.nonzero((beta != 0) | ~penalized)[0]
            for _ in range(max_its):
                if max([update(j) for j in active] + [0.]) < tol:
                    break

    return beta, converged, niter

def irls_mu_lasso(Z,
                  y,
                  lagrange,
                  delta,
                  family,
                  initial,
                  solve_args={'tol': 1.e-7, 'max_its': 1000},
                  irls_args={'tol': 1.e-7, 'max_its': 100}):
    r"""
    GMU lasso for one (lambda, delta) by iteratively reweighted
    least squares around `mu_lasso`.

    Parameters
    ----------

    Z : np.float((n,p+1))
        Standardized design, first column the intercept.

    y : np.float(n)
        Response vector.

    lagrange, delta : float
        Values of $\lambda$ and $\delta$.

    family : `meselect.families.family`

    initial : np.float(p+1)
        Starting (intercept, coefficients).

    Returns
    -------

    theta : np.float(p+1)
        Intercept and coefficients.

    converged : bool

    niter : int
        Number of reweighting steps.
    """
    n = Z.shape[0]
    theta = np.array(initial, float)

    if family.name == 'gaussian':
        theta, converged, _ = mu_lasso(Z, y, lagrange, delta,
                                       initial=theta,
                                       intercept=True,
                                       solve_args=solve_args)
        return theta, converged, 1

    tol = irls_args.get('tol', 1.e-7)
    max_its = int(irls_args.get('max_its', 100))

    theta_older = theta_old = theta
    converged = False
    niter = 0
    for niter in range(1, max_its + 1):
        Zw, zw, delta_eff = working_problem(Z, y, delta, family, theta_old)
        theta, inner_converged, _ = mu_lasso(Zw, zw, lagrange, delta_eff,
                                             initial=theta_old,
                                             intercept=True,
                                             solve_args=solve_args)
        if not np.all(np.isfinite(theta)):
            # keep the last finite iterate
            theta = theta_old
            break

        # the second comparison stops two-cycles
        if (np.fabs(theta - theta_old).sum() < tol or
            np.fabs(theta - theta_older).sum() < tol):
            converged = inner_converged
            break
        theta_older, theta_old = theta_old, theta

    return theta, converged, niter

def working_problem(Z, y, delta, family, theta, min_weight=1.e-5):
    r"""
    Weighted least squares approximation of the
    likelihood at `theta`.

    Returns
    -------

    Zw : np.float((n,p+1))
        Design scaled by the square root of the weights.

    zw : np.float(n)
        Working response scaled by the square root of the weights.

    delta_eff : float
        Value of $\delta$ rescaled by the root mean square weight.
    """
    n = Z.shape[0]
    eta = Z.dot(theta)
    V = np.maximum(family.mean_derivative(eta), min_weight)
    z = eta + (y - family.mean(eta)) / V
    sqrtV = np.sqrt(V)
    delta_eff = delta * np.sqrt((V ** 2).sum()) / np.sqrt(n)
    return sqrtV[:, None] * Z, sqrtV * z, delta_eff
