#!/usr/bin/env python3
"""
Setup script for Chicago Crash Injury project

Install in development mode:
    pip install -e .

This allows importing from anywhere:
    from config.paths import CHICAGO_BRONZE_CRASHES, CHICAGO_SILVER_CRASHES
    from data_engineering.clean import clean_crashes
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
with open(requirements_file) as f:
    # Filter out duplicates and empty lines
    requirements = []
    seen = set()
    for line in f:
        line = line.strip()
        if line and not line.startswith('#'):
            # Extract package name (before ==, >=, etc.)
            pkg_name = line.split('==')[0].split('>=')[0].split('<=')[0].split('<')[0].split('>')[0].strip()
            if pkg_name not in seen:
                requirements.append(line)
                seen.add(pkg_name)

# Read ML requirements
ml_requirements_file = Path(__file__).parent / "requirements_ml.txt"
if ml_requirements_file.exists():
    with open(ml_requirements_file) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith('#'):
                pkg_name = line.split('==')[0].split('>=')[0].strip()
                if pkg_name not in seen:
                    requirements.append(line)
                    seen.add(pkg_name)

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
with open(readme_file, encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="chicago-crash-injury",
    version="1.0.0",
    description="Exploration and bagged-tree injury prediction for Chicago traffic crashes",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=23.0.0',
            'flake8>=6.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'crash-download=data_engineering.download.download_chicago_crashes:main',
            'crash-clean=data_engineering.clean.clean_crashes:main',
            'crash-explore=analysis.explore_crashes:main',
            'crash-train=ml_engineering.train_injury_model:main',
            'crash-pipeline=scripts.run_pipeline:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
