"""
flightsql - SQL over the airline flights database
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="flightsql",
    version="0.1.0",
    author="flightsql Contributors",
    description="Query runner and SQL walkthrough for an airline flights PostgreSQL database",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Topic :: Database :: Front-Ends",
    ],
    python_requires=">=3.10",
    install_requires=[
        # Core - Database driver
        "psycopg[binary]>=3.1.0",

        # Core - Data & Validation
        "pandas>=2.2.0",
        "pydantic>=2.5.0",

        # Core - Logging
        "loguru",

        # Core - Configuration
        "python-dotenv>=1.0.0",
        "pyyaml",

        # Core - Utilities
        "tabulate>=0.9.0",
    ],
    extras_require={
        # Development
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "flightsql=flightsql.main:main",
        ],
    },
)
