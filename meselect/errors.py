"""
Exceptions and warning categories raised by the fitting routines.

Errors in the input are raised immediately as `ConfigurationError`.
Problems that only affect part of a fit (an iteration cap reached at
one radius, an infeasible linear program at one value of delta)
are reported with `warnings.warn` so that the rest of the
path is still returned.
"""


class ConfigurationError(ValueError):
    """
    Malformed input: dimension mismatch, a covariance
    that is not positive semidefinite, an empty or
    negative grid, or a family that the requested
    method does not support.
    """


class ExternalSolverFailure(RuntimeError):
    """
    The linear program backend or the auxiliary
    lasso routine failed for reasons other than
    infeasibility of the problem we handed it.
    """


class InfeasibleSubproblem(RuntimeError):
    """
    A linear program has no feasible point.
    """


class NumericalNonConvergence(RuntimeWarning):
    """
    An iterative solver stopped at its iteration cap.
    """


class InfeasibleSubproblemWarning(RuntimeWarning):
    """
    A grid point was dropped from a sweep because
    its linear program was infeasible.
    """
