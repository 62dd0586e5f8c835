#!/usr/bin/env python
"""
Brakeline
=========

Brakeline is a Python notifier for `Airbrake <https://airbrake.io/>`_. It
reports exceptions to the Airbrake notices API from a background thread,
lets you filter or drop notices before they are sent, and ships a WSGI
middleware and a ``logging`` handler.
"""

from setuptools import setup, find_packages
import re
import ast


_version_re = re.compile(r'VERSION\s+=\s+(.*)')

with open('brakeline/__init__.py', 'rb') as f:
    version = str(ast.literal_eval(_version_re.search(
        f.read().decode('utf-8')).group(1)))


install_requires = [
    'blinker>=1.1',
    'requests>=2.0',
]

tests_require = [
    'flake8',
    'mock',
    'pytest>=3.2.0',
    'pytest-timeout',
    'responses',
    'webob',
]


setup(
    name='brakeline',
    version=version,
    author='Brakeline Team',
    url='https://github.com/brakeline/brakeline',
    description='Brakeline is a client for Airbrake (https://airbrake.io)',
    long_description=__doc__,
    packages=find_packages(exclude=("tests", "tests.*",)),
    zip_safe=False,
    python_requires='>=3.6',
    extras_require={
        'tests': tests_require,
    },
    license='BSD',
    install_requires=install_requires,
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'brakeline = brakeline.scripts.runner:main',
        ],
        'paste.filter_app_factory': [
            'brakeline = brakeline.contrib.paste:airbrake_filter_factory',
        ],
    },
    classifiers=[
        'Intended Audience :: Developers',
        'Intended Audience :: System Administrators',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python',
        'Topic :: Software Development',
    ],
)
