"""
meselect: variable selection with covariates measured with error.
"""
from .info import __version__
