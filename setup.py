#!/usr/bin/env python
''' Installation script for meselect package '''

import os
from os.path import join as pjoin, exists

# BEFORE importing setuptools, remove MANIFEST. setuptools doesn't properly
# update it when the contents of directories change.
if exists('MANIFEST'): os.remove('MANIFEST')

from setuptools import setup

def read_vars_from(info_file):
    """ Read variables from Python text file

    Parameters
    ----------
    info_file : str
        Filename of file to read

    Returns
    -------
    info_vars : Bunch instance
        Bunch object where variables read from `info_file` appear as
        attributes
    """
    # Use exec for compabibility with Python 3
    ns = {}
    with open(info_file, 'rt') as fobj:
        exec(fobj.read(), ns)
    return Bunch(ns)

class Bunch(object):
    def __init__(self, vars):
        for key, name in vars.items():
            if key.startswith('__'):
                continue
            self.__dict__[key] = name

# Get various parameters for this version, stored in meselect/info.py
info = read_vars_from(pjoin('meselect', 'info.py'))

# Set setuptools extra arguments
extra_setuptools_args = dict(
    zip_safe=False,
    extras_require = dict(
        test=info.TEST_REQUIRES))

def main(**extra_args):
    setup(name=info.NAME,
          maintainer=info.MAINTAINER,
          maintainer_email=info.MAINTAINER_EMAIL,
          description=info.DESCRIPTION,
          url=info.URL,
          download_url=info.DOWNLOAD_URL,
          license=info.LICENSE,
          classifiers=info.CLASSIFIERS,
          author=info.AUTHOR,
          author_email=info.AUTHOR_EMAIL,
          platforms=info.PLATFORMS,
          version=info.VERSION,
          install_requires=info.REQUIRES,
          provides=info.PROVIDES,
          packages     = ['meselect',
                          'meselect.algorithms',
                          'meselect.algorithms.tests',
                          'meselect.tests'
                          ],
          package_data = {},
          data_files=[],
          scripts=[],
          long_description=info.LONG_DESCRIPTION,
          **extra_args
         )

#simple way to test what setup will do
#python setup.py install --prefix=/tmp
if __name__ == "__main__":
    main(**extra_setuptools_args)
