"""
Setup.py script for dbm_configure
"""
from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
import os

here = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='dbm_configure',
    version='0.1.0',
    description='Find the host ndbm library for building a _dbm extension',
    long_description=long_description,

    license='MIT',

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Build Tools',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
    keywords='dbm ndbm gdbm configure',

    packages=find_packages(include=['dbm_configure', 'dbm_configure.*']),

    install_requires=['py', 'setuptools', 'cffi'],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        "console_scripts": [
            "dbm-configure = dbm_configure.__main__:main",
        ],
    },
)
