import os

from setuptools import find_packages
from setuptools import setup


HERE = os.path.dirname(os.path.abspath(__file__))


def get_long_description():
    with open(os.path.join(HERE, "README.md")) as f:
        return f.read()


setup(
    name="dbtrace",
    version="0.1.0",
    description="Per database query tracing for Python database clients",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    license="BSD",
    packages=find_packages(exclude=["tests*"]),
    package_data={
        "dbtrace": ["py.typed"],
    },
    zip_safe=False,
    python_requires=">=3.8",
    install_requires=[
        "attrs>=20",
        "envier>=0.5,<1",
        "wrapt>=1",
    ],
    extras_require={
        "test": [
            "mock",
            "pytest>=7",
        ],
    },
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
)
