#!/usr/bin/env python

# Project skeleton maintained at https://github.com/jaraco/skeleton

import setuptools

name = 'ircline'
description = 'Threaded IRC (Internet Relay Chat) client library for Python'

params = dict(
    name=name,
    version='1.0.0',
    description=description or name,
    long_description=description,
    packages=setuptools.find_packages(),
    include_package_data=True,
    package_data={
        name: ['codes.txt'],
    },
    python_requires='>=3.8',
    install_requires=[
        'jaraco.collections',
        'jaraco.text',
        'jaraco.logging',
        'jaraco.functools>=1.20',
        'jaraco.stream',
        'more_itertools',
        'importlib_resources; python_version < "3.12"',
    ],
    extras_require={
        'testing': [
            # upstream
            'pytest>=6',
            'pytest-sugar>=0.9.1',
        ],
        'docs': [
            # upstream
            'sphinx',
            'jaraco.packaging>=3.2',
            'rst.linker>=1.9',
            'furo',
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    entry_points={},
)
if __name__ == '__main__':
    setuptools.setup(**params)
