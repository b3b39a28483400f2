from setuptools import find_packages, setup

setup(
    name="mosaic-evolution",
    version="0.1.0",
    description="Island-model genetic algorithm that approximates a target image",
    packages=find_packages(include=["mosaic", "mosaic.*"]),
    python_requires=">=3.11",
    install_requires=[
        # Numerics
        "numpy>=2.1.0",

        # Imaging
        "pillow>=10.4.0",

        # Configuration & logging
        "pyyaml>=6.0.2",
        "loguru>=0.7.2",
        "click>=8.1.7",

        # Validation
        "pydantic>=2.9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=8.3.0",
            "pytest-cov>=5.0.0",
            "pytest-mock>=3.14.0",
            "ruff>=0.7.0",
            "mypy>=1.13.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mosaic=mosaic.cli.commands:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Multimedia :: Graphics",
    ],
)
