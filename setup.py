"""Configuration for the infer package."""

from setuptools import setup, find_packages


setup(
    name="infer",
    version="0.1.0",
    description="Subword tokenizers and numeric postprocessing for neural inference",
    packages=find_packages(include=["infer", "infer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "numpy",
        "regex",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    zip_safe=False,
)
