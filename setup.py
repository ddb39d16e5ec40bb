"""
Allows installation via pip, e.g. by navigating to this directory with the command prompt, and using 'pip install .'
"""

from setuptools import setup, find_packages

# Make sure to include the readme
from pathlib import Path
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name = 'hybridsim',
    version = '0.1.0',
    license = 'gpl-3.0',
    packages = find_packages(exclude = ['tests', 'tests.*']),
    install_requires = ['numpy', 'matplotlib', 'scipy'],
    extras_require = {'test': ['pytest']},
    python_requires = '>=3.7',
    description = 'Internal ballistics simulation of self-pressurising hybrid rocket motors',
    keywords = ['rocket', 'hybrid', 'motor', 'nitrous', 'ballistics', 'spaceflight'],
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Programming Language :: Python :: 3'],
    long_description = long_description,
    long_description_content_type = 'text/markdown'
)
