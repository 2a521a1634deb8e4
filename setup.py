from os import path
import io
from setuptools import setup, find_packages

with io.open(path.join(path.abspath(path.dirname(__file__)), 'README.md'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name = 'mogilefs',
    version = '1.0.0',
    description = 'Client library for the MogileFS distributed file storage',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license = 'GPL',

    packages = find_packages(),

    python_requires = '>=3.6',

    install_requires = [
        'requests',
        'urllib3',
    ],

    extras_require = {
        'test': [
            'pytest',
        ],
    },

    entry_points = {
        'console_scripts': [
            'mogilefs = mogilefs.client.shell:main',
        ],
    }
)
