"""
Setup file.
"""

import os

from setuptools import find_packages, setup

URL = "https://github.com/zackees/gcclink"
KEYWORDS = "linker gcc clang ld toolchain lto sanitizer compiler"
HERE = os.path.dirname(os.path.abspath(__file__))


if __name__ == "__main__":
    setup(
        name="gcclink",
        version="0.1.0",
        description="Link object files through a gcc-compatible toolchain driver",
        maintainer="Zachary Vorhies",
        keywords=KEYWORDS,
        url=URL,
        package_dir={"": "src"},
        packages=find_packages(os.path.join(HERE, "src")),
        python_requires=">=3.9",
        install_requires=["psutil"],
        extras_require={"test": ["pytest"]},
        entry_points={"console_scripts": ["gcclink=gcclink.cli:main"]},
        include_package_data=True)
