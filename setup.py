# Copyright (c) 2024 nggit

import os

from setuptools import setup


def get_version(path):
    with open(path, 'r') as f:
        for line in f:
            if line.startswith('__version__'):
                return line.split('=')[1].strip().strip('\'"')


setup(
    name='onheaders',
    version=get_version(
        os.path.join(os.path.dirname(__file__), 'onheaders', '__init__.py')
    ),
    description='Execute a listener when a response is about to write '
                'its headers',
    packages=['onheaders'],
    python_requires='>=3.7',
    install_requires=['tremolo<0.4'],
    extras_require={'test': ['awaiter']}
)
