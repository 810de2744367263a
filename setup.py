import re
from pathlib import Path
from setuptools import find_packages, setup


def _read_version():
    init = Path(__file__).parent / "src" / "mdlmol" / "__init__.py"
    match = re.search(r'^__version__ = "([^"]+)"', init.read_text(), re.MULTILINE)
    return match.group(1)


setup(
    name="mdlmol",
    version=_read_version(),
    description="Reading and writing MDL MOL (V2000) and SD files",
    long_description=(Path(__file__).parent / "README.rst").read_text(),
    long_description_content_type="text/x-rst",
    license="BSD-3-Clause",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "numpy >= 1.25",
    ],
    extras_require={
        "test": [
            "pytest >= 7.0",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Chemistry",
    ],
)
