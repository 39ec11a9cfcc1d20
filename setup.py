#!/usr/bin/env python
from setuptools import setup, find_packages

setup(
    name="phydata",
    version="0.1",
    packages=find_packages(exclude=['contrib', 'docs', 'tests']),
    install_requires=['numpy'],
    extras_require={
        'test': ['pytest'],
    },
    tests_require=['pytest'],
    author="phydata developers",
    description="Phylogenetic character data: specimen observations, DNA sequences and TNT/nexus matrices",
    keywords="phylogenetics nexus tnt morphology dna",
    url="",
    license="BSD-2-Clause",
    zip_safe=True,
    include_package_data=True,
    package_data={
        'phydata': ['examples/*.nex', 'examples/*.tab'],
    },
    entry_points={
        'console_scripts': [
            'phydata_obs = phydata.bin.phydata_obs:main',
            'phydata_dna = phydata.bin.phydata_dna:main',
            'phydata_matrix = phydata.bin.phydata_matrix:main',
        ],
    },
)
