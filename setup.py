from setuptools import find_packages, setup

setup(
    name="ci-trigger",
    version="0.1.0",
    packages=find_packages(
        include=[
            "trigger_common",
            "trigger_common.*",
            "trigger_client",
            "trigger_client.*",
            "trigger_runner",
            "trigger_runner.*",
        ]
    ),
    install_requires=[
        "requests>=2.31.0",
        "click>=8.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-xdist>=3.3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ci-trigger=trigger_runner.cli:main",
        ],
    },
    python_requires=">=3.11",
)
