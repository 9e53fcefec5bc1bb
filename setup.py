"""Setup script for the equation citation and numbering engine."""

from setuptools import setup, find_packages

setup(
    name="equation-citator",
    version="1.0.0",
    description="Equation and figure auto-numbering with citation tracking for Markdown notes",
    author="Data Process Team",
    python_requires=">=3.9",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pyyaml>=6.0",
        "tqdm>=4.66.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "black>=23.0.0", "isort>=5.12.0"],
    },
    entry_points={
        "console_scripts": [
            "renumber-notes=equation_citator.cli:main",
        ],
    },
)
