from setuptools import setup, find_packages

setup(
    name="coopcache",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        'numpy',
        'matplotlib'
    ],
    extras_require={
        'test': ['pytest'],
    },
)
