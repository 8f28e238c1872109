from functools import wraps
import inspect

import numpy as np

def set_seed_iftrue(condition, seed=10):
    """
    Fix the seed for random test.

    Parameters
    ----------

    condition : bool or callable
        Whether to fix the seed.

    seed : int
        Random seed passed to np.random.seed

    Returns
    -------

    decorator : function
        Decorator which, when applied to a function, sets the
        random seed before running the test and then
        restores numpy's random state after running the test.
    """

    def set_seed_decorator(f):

        # Allow for both boolean or callable set conditions.
        if callable(condition):
            set_val = lambda : condition()
        else:
            set_val = lambda : condition

        @wraps(f)
        def set_seed_func(*args, **kwargs):
            """Set_Seed for normal test functions."""
            if set_val():
                old_state = np.random.get_state()
                np.random.seed(seed)
            try:
                return f(*args, **kwargs)
            finally:
                if set_val():
                    np.random.set_state(old_state)

        @wraps(f)
        def set_seed_gen(*args, **kwargs):
            """Set_Seed for test generators."""
            if set_val():
                old_state = np.random.get_state()
                np.random.seed(seed)
            try:
                for x in f(*args, **kwargs):
                    yield x
            finally:
                if set_val():
                    np.random.set_state(old_state)

        if inspect.isgeneratorfunction(f):
            return set_seed_gen
        return set_seed_func

    return set_seed_decorator
