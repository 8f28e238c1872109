""" This file contains defines parameters for meselect that we use to fill
settings in setup.py, the meselect top-level docstring, and for building the docs.
In setup.py in particular, we exec this file, so it cannot import meselect
"""

# meselect version information.  An empty _version_extra corresponds to a
# full release.  '.dev' as a _version_extra string means this is a development
# version
_version_major = 0
_version_minor = 1
_version_micro = 0
_version_extra = '.dev'

# Format expected by setup.py and doc/source/conf.py: string of form "X.Y.Z"
__version__ = "%s.%s.%s%s" % (_version_major,
                              _version_minor,
                              _version_micro,
                              _version_extra)

CLASSIFIERS = ["Development Status :: 3 - Alpha",
               "Environment :: Console",
               "Intended Audience :: Science/Research",
               "License :: OSI Approved :: BSD License",
               "Operating System :: OS Independent",
               "Programming Language :: Python",
               "Programming Language :: Python :: 3",
               "Topic :: Scientific/Engineering"]

description  = 'Variable selection for high-dimensional regression with measurement error'

# Note: this long_description is actually a copy/paste from the top-level
# README.rst, so that it shows up nicely on PyPI.  So please remember to edit
# it only in one place and sync it correctly.
long_description = \
"""
========
meselect
========

Corrected lasso, matrix uncertainty selector (MUS), generalized MUS and
the GMU lasso for linear and generalized linear models whose covariates
are measured with error.
"""

# versions
NUMPY_MIN_VERSION = '1.21'
SCIPY_MIN_VERSION = '1.9'
PANDAS_MIN_VERSION = '1.3'
SKLEARN_MIN_VERSION = '1.1'

NAME                = 'meselect'
MAINTAINER          = "meselect developers"
MAINTAINER_EMAIL    = ""
DESCRIPTION         = description
LONG_DESCRIPTION    = long_description
URL                 = ""
DOWNLOAD_URL        = ""
LICENSE             = "BSD license"
CLASSIFIERS         = CLASSIFIERS
AUTHOR              = "meselect developers"
AUTHOR_EMAIL        = ""
PLATFORMS           = "OS Independent"
MAJOR               = _version_major
MINOR               = _version_minor
MICRO               = _version_micro
ISRELEASE           = _version_extra == ''
VERSION             = __version__
STATUS              = 'alpha'
PROVIDES            = ["meselect"]
REQUIRES            = ["numpy>=%s" % NUMPY_MIN_VERSION,
                       "scipy>=%s" % SCIPY_MIN_VERSION,
                       "pandas>=%s" % PANDAS_MIN_VERSION,
                       "scikit-learn>=%s" % SKLEARN_MIN_VERSION]
TEST_REQUIRES       = ["pytest"]
