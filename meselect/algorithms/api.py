from .projection import project_l1_ball

from .corrected_lasso import corrected_lasso, radius_grid

from .cross_valid import cv_corrected_lasso

from .mus import mus, fit_mus, fit_gmus, mus_problem, solve_lp

from .mu_lasso import mu_lasso, irls_mu_lasso

from .gmu_lasso import fit_gmu_lasso

from .lasso import cv_lasso
