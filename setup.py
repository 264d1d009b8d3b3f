from setuptools import setup, find_packages


with open("README.md", encoding="utf-8") as f:
    _long_description = f.read()


setup(
    name="ace-rotations",
    version="0.1.0",
    description="Rotation and permutation invariant coupling coefficients for the Atomic Cluster Expansion.",
    long_description=_long_description,
    long_description_content_type="text/markdown",
    author="ace-rotations team",
    packages=find_packages(exclude=["examples", "misc", "docs"]),
    python_requires=">=3.9",
    install_requires=[
        "jax",
        "jaxlib",
        "sympy",
        "numpy",
        "attrs",
    ],
    extras_require={
        "dev": [
            "pytest",
            "nox",
        ],
    },
    license="Apache-2.0",
    classifiers=[
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
