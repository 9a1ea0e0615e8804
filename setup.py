from setuptools import setup, find_packages

setup(
    name="ohmnet",
    version="0.1.0",
    description="Equivalent resistance of resistor networks by series/parallel graph reduction",
    author="Your Name",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "networkx",
        "numpy"
    ],
    extras_require={
        "test": ["pytest"]
    },
    python_requires=">=3.7",
)
