from setuptools import setup, find_packages

setup(
    name="phi-accrual",
    version="0.1.0",
    description="Phi accrual failure detector: continuous suspicion levels from heartbeat arrivals",
    author="adamfilli",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "matplotlib",
        "numpy",
        "pandas",
    ],
    extras_require={
        "test": ["pytest"],
    },
    include_package_data=True,
    python_requires=">=3.11",
)
