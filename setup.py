from setuptools import setup, find_packages

# Safely read the long description from README.md, if present
try:
    with open("README.md", encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = ""

VERSION = "0.1.0"

setup(
    name="bidsubset",
    version=VERSION,
    description="Extract a glob-filtered subset of a BIDS dataset by copy or symlink",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["bidsubset", "bidsubset.*"]),
    package_data={"bidsubset.resources": ["*.yaml"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0",
        "structlog>=23.1",
        "rich>=13.0",
        "PyYAML>=5.4",
        "pydantic>=2.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "bidsubset-cli = bidsubset.cli:cli",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
