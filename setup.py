#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""The setup script."""

from setuptools import setup, find_packages

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

setup(
    name='micore',
    version='0.2.0',
    description="Minimal implementation of cloud optical retrieval",
    long_description=readme + '\n\n' + history,
    long_description_content_type='text/x-rst',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': [
            'micore=micore.cli:main'
        ]
    },
    include_package_data=True,
    python_requires='>=3.8',
    install_requires=[
        'Click>=7.0',
        'numpy',
        'numba',
        'matplotlib',
        'PyYAML',
    ],
    extras_require={
        'test': ['pytest'],
    },
    license="MIT license",
    zip_safe=False,
    keywords='micore cloud retrieval remote-sensing',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: Atmospheric Science',
    ],
)
