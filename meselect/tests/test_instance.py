from itertools import product

import numpy as np

from .instance import measurement_error_instance

def test_measurement_error_instance():

    for family, random_signs, equicorrelated in product(
        ['gaussian', 'binomial', 'poisson'],
        [True, False],
        [True, False]):
        W, y, beta, active, sigma_uu, X = measurement_error_instance(n=10,
                                                                     p=20,
                                                                     s=4,
                                                                     rho=0.3,
                                                                     signal=0.5,
                                                                     family=family,
                                                                     random_signs=random_signs,
                                                                     equicorrelated=equicorrelated)
        assert W.shape == X.shape == (10, 20)
        assert y.shape == (10,)
        assert active.shape == (4,)
        np.testing.assert_allclose(sigma_uu, 0.2 * np.identity(20))

def test_no_measurement_error():

    W, y, beta, active, sigma_uu, X = measurement_error_instance(n=10, p=5, s=2, sigma_uu=0.)
    np.testing.assert_allclose(W, X)
