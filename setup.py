from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="machine-info-reconciler",
    version="0.1.0",
    author="Machine Data Services",
    description="Reconciles machine master, telemetry and alert records into one permission-masked machine record",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pandas>=1.3.0",
        "python-dotenv>=0.19.0",
        "python-dateutil>=2.8.0",
        "SQLAlchemy>=2.0.0",
    ],
    extras_require={
        "postgres": [
            "psycopg2-binary>=2.9.0",
        ],
        "test": [
            "pytest>=7.0.0",
        ],
        "all": [
            "psycopg2-binary>=2.9.0",
            "pytest>=7.0.0",
        ],
    },
)
