r"""
This module contains the matrix uncertainty selector (MUS) of
`Rosenbaum and Tsybakov`_ and its generalization to GLMs
(GMUS) of `Sorensen et al.`_, both written as linear programs.

The MUS solves

.. math::

    \text{minimize}_{\beta} \|\beta\|_1 \ \text{subject to} \
        \frac{1}{n}\|W^T(y - W\beta)\|_{\infty} \leq \lambda + \delta \|\beta\|_1.

With auxiliary variables $u_j \geq |\beta_j|$ the term
$\delta \|\beta\|_1 = \delta \sum_j u_j$ is linear, so the whole
problem is a linear program in $(u, \beta)$. For $\delta = 0$ it
is the Dantzig selector.

For GLMs the residual $y - \mu(W\beta)$ is linearized around the
current estimate and the program is re-solved until the estimate
stops changing.

.. _Rosenbaum and Tsybakov: http://arxiv.org/abs/0812.2818
.. _Sorensen et al.: http://arxiv.org/abs/1606.03944

"""

import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple

import numpy as np
from scipy.optimize import linprog

from ..base import (CoefficientPath,
                    check_data,
                    check_grid,
                    check_nonnegative,
                    standardize,
                    unstandardize)
from ..errors import (ExternalSolverFailure,
                      InfeasibleSubproblem,
                      InfeasibleSubproblemWarning,
                      NumericalNonConvergence)
from ..families import family_from_name
from .lasso import cv_lasso
from .mu_lasso import irls_mu_lasso, working_problem

class LPProblem(NamedTuple):

    # minimize objective.dot(x) subject to
    # matrix.dot(x) (direction) rhs, row by row

    objective : np.ndarray
    matrix : np.ndarray
    direction : np.ndarray
    rhs : np.ndarray

    # (lower, upper) for each variable, None if unbounded

    bounds : list

def mus_problem(W, y, lagrange, delta, intercept=False):
    r"""
    Linear program for the MUS.

    The variables are $x = (u, \beta)$, each of length $p$.
    Rows $0, \dots, 2p-1$ force $u_j \geq |\beta_j|$, rows
    $2p, \dots, 4p-1$ are the two sides of the score bound.

    Parameters
    ----------

    W : np.float((n,p))
        Matrix of measurements.

    y : np.float(n)
        Response vector.

    lagrange : float
        Value of $\lambda$.

    delta : float
        Value of $\delta$.

    intercept : bool
        If True the first column of `W` is unpenalized: it does not
        enter the objective or $\|\beta\|_1$, and its score is
        constrained to zero.

    Returns
    -------

    problem : `LPProblem`
    """
    n, p = W.shape
    I = np.identity(p)
    Q = W.T.dot(W) / n
    score = W.T.dot(y) / n

    penalized = np.ones(p)
    if intercept:
        penalized[0] = 0

    lagrange_vec = lagrange * penalized

    # delta * sum_k u_k on every penalized row
    delta_block = -delta * np.multiply.outer(penalized, penalized)

    matrix = np.vstack([np.hstack([-I, -I]),
                        np.hstack([-I, I]),
                        np.hstack([delta_block, Q]),
                        np.hstack([delta_block, -Q])])
    rhs = np.hstack([np.zeros(2 * p),
                     lagrange_vec + score,
                     lagrange_vec - score])

    return LPProblem(objective=np.hstack([penalized, np.zeros(p)]),
                     matrix=matrix,
                     direction=np.array(['<='] * (4 * p)),
                     rhs=rhs,
                     bounds=[(None, None)] * (2 * p))

def solve_lp(problem, method='highs'):
    """
    Solve an `LPProblem` with `scipy.optimize.linprog`.

    Returns
    -------

    x : np.ndarray
        Solution vector.

    Raises
    ------

    InfeasibleSubproblem
        If the backend reports that no feasible point exists.

    ExternalSolverFailure
        For any other failure of the backend.
    """
    matrix = np.asarray(problem.matrix)
    rhs = np.asarray(problem.rhs)
    direction = np.asarray(problem.direction)

    upper = direction == '<='
    lower = direction == '>='
    equal = direction == '=='
    if not np.all(upper | lower | equal):
        raise ValueError("direction should be one of ['<=', '>=', '==']")

    A_ub = np.vstack([matrix[upper], -matrix[lower]])
    b_ub = np.hstack([rhs[upper], -rhs[lower]])
    A_eq, b_eq = matrix[equal], rhs[equal]

    try:
        result = linprog(problem.objective,
                         A_ub=A_ub if A_ub.shape[0] else None,
                         b_ub=b_ub if A_ub.shape[0] else None,
                         A_eq=A_eq if A_eq.shape[0] else None,
                         b_eq=b_eq if A_eq.shape[0] else None,
                         bounds=problem.bounds,
                         method=method)
    except (ValueError, np.linalg.LinAlgError) as e:
        raise ExternalSolverFailure('linear program backend failed: %s' % e) from e

    if result.status == 2:
        raise InfeasibleSubproblem(result.message)
    if result.status != 0:
        raise ExternalSolverFailure('linear program backend failed (status %d): %s' % (result.status, result.message))
    return result.x

def mus(W, y, lagrange, delta, intercept=False):
    """
    Solve the MUS for one value of delta.

    Returns
    -------

    beta : np.float(p)
    """
    p = W.shape[1]
    return solve_lp(mus_problem(W, y, lagrange, delta, intercept=intercept))[p:]

def linearized_problem(Z, y, lagrange, delta, family, theta):
    """
    MUS linear program for a GLM, linearized around `theta`.
    `Z` has the intercept as its first column.
    """
    Zw, zw, delta_eff = working_problem(Z, y, delta, family, theta)
    return mus_problem(Zw, zw, lagrange, delta_eff, intercept=True)

def gmus(Z,
         y,
         lagrange,
         delta,
         family,
         initial,
         solve_args={'tol': 1.e-7, 'max_its': 10}):
    """
    Generalized MUS for one value of delta: a bounded fixed point
    iteration, each step solving a fresh linearized program.

    Parameters
    ----------

    Z : np.float((n,p+1))
        Standardized design, first column the intercept.

    y : np.float(n)
        Response vector.

    lagrange, delta : float

    family : `meselect.families.family`

    initial : np.float(p+1)
        Starting (intercept, coefficients).

    Returns
    -------

    theta : np.float(p+1)

    converged : bool

    niter : int
    """
    tol = solve_args.get('tol', 1.e-7)
    max_its = int(solve_args.get('max_its', 10))
    p = Z.shape[1]

    theta_older = theta_old = np.asarray(initial, float)
    converged = False
    niter = 0
    for niter in range(1, max_its + 1):
        problem = linearized_problem(Z, y, lagrange, delta, family, theta_old)
        theta = solve_lp(problem)[p:]

        # the second comparison stops two-cycles
        if (np.fabs(theta - theta_old).sum() < tol or
            np.fabs(theta - theta_older).sum() < tol):
            converged = True
            break
        theta_older, theta_old = theta_old, theta

    return theta, converged, niter

def fit_gmus(W,
             y,
             lagrange=None,
             delta=None,
             family='gaussian',
             n_jobs=1,
             solve_args={'tol': 1.e-7, 'max_its': 10}):
    r"""
    Fit the (generalized) MUS over a grid of delta.

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
        `0, 0.02, ..., 0.5`.

    family : str
        One of 'gaussian', 'binomial', 'poisson'.

    n_jobs : int
        Number of threads solving different values of delta.

    solve_args : dict
        `tol` and `max_its` of the reweighting iteration
        (not used for the gaussian family).

    Returns
    -------

    path : `CoefficientPath`
        Coefficients on the scale of `W`. Values of delta
        whose program is infeasible have NaN coefficients.
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

    if fam.name != 'gaussian':
        # ordinary GLM lasso at lagrange, i.e. the delta=0 GMU lasso
        initial = np.zeros(p + 1)
        initial[0] = fam.null_intercept(y)
        initial, start_converged = irls_mu_lasso(Z1, y, lagrange, 0., fam, initial)[:2]
        if not start_converged:
            warnings.warn('GLM lasso used to start the reweighted MUS did not converge',
                          NumericalNonConvergence)

    def solve_delta(value):
        try:
            if fam.name == 'gaussian':
                return mus(Z1, y, lagrange, value, intercept=True), True, 1
            return gmus(Z1, y, lagrange, value, fam, initial, solve_args=solve_args)
        except InfeasibleSubproblem as e:
            warnings.warn('MUS linear program infeasible at delta=%0.3e: %s' % (value, e),
                          InfeasibleSubproblemWarning)
            return np.full(p + 1, np.nan), False, 0

    if n_jobs > 1:
        with ThreadPoolExecutor(max_workers=n_jobs) as executor:
            results = list(executor.map(solve_delta, delta))
    else:
        results = [solve_delta(value) for value in delta]

    theta = np.array([r[0] for r in results])
    converged = np.array([r[1] for r in results])
    niter = np.array([r[2] for r in results])

    feasible = niter > 0
    if not converged[feasible].all():
        warnings.warn('reweighted MUS did not converge for %d values of delta' % (~converged[feasible]).sum(),
                      NumericalNonConvergence)

    intercept, coef = unstandardize(theta, means, scales)
    return CoefficientPath(grid=delta,
                           coef=coef,
                           intercept=intercept,
                           family=fam.name,
                           converged=converged,
                           niter=niter,
                           lagrange=lagrange)

def fit_mus(W,
            y,
            lagrange=None,
            delta=None,
            n_jobs=1):
    """
    Fit the MUS for a linear model over a grid of delta.
    See `fit_gmus`.
    """
    return fit_gmus(W,
                    y,
                    lagrange=lagrange,
                    delta=delta,
                    family='gaussian',
                    n_jobs=n_jobs)
