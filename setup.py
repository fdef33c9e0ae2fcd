# setup.py — Packaging for the coomul threaded sparse multiplication library.
from pathlib import Path

from setuptools import find_packages, setup

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

setup(
    name="coomul",
    version="0.1.0",
    author="The coomul Contributors",
    author_email="coomul@example.com",
    description="Row-parallel multiplication of COO sparse matrices",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["coomul", "coomul.*"]),
    python_requires=">=3.9",
    install_requires=["numpy>=1.25", "matplotlib>=3.7"],
    extras_require={
        "torch": ["torch>=2.0"],
        "dev": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "coomul = coomul.cli:main",
            "coomul-bench = coomul.cli:main_bench",
        ],
    },
    zip_safe=False,
)
