"""
Setup script for ns_cavity_flow package.
"""

from setuptools import setup, find_packages

setup(
    name="ns_cavity_flow",
    version="0.1.0",
    description="Explicit finite-difference lid-driven cavity flow solver and visualizer",
    author="Andrey",
    packages=find_packages(exclude=["tests", "tests.*", "benchmarks", "benchmarks.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.20",
        "numba>=0.56",
        "matplotlib>=3.5",
    ],
    extras_require={
        "dev": ["pytest>=7.0", "black", "flake8"],
    },
)
