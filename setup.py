# setup.py
from setuptools import setup, find_packages

setup(
    name="elnames",
    version="0.4.0",
    description="Prefix namespacing for Emacs Lisp source trees",
    packages=find_packages(include=["elnames", "elnames.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["elnames=elnames.__main__:main"],
    },
    zip_safe=False,
)
