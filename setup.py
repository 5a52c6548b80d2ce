from setuptools import setup, find_packages

setup(
    name="auto-swapper",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "web3>=7.0.0",
        "python-dotenv>=1.0.0",
        "eth-account>=0.13.0",
        "click>=8.1.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "autoswapper=auto_swapper.cli:main",
        ],
    },
    python_requires=">=3.10",
)
