import os
from setuptools import setup, find_packages

setup(
    name="RunImport",
    version="0.1.0",
    package_dir={"": "services/run_import/src"},
    packages=find_packages(where="services/run_import/src"),
    install_requires=[
        "aiohttp>=3.9",
        "backoff>=2.2",
        "fastapi>=0.110",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "prometheus-client>=0.19",
        "python-multipart>=0.0.9",
        "uvicorn>=0.27",
    ],
    extras_require={
        "test": [
            "httpx>=0.26",
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "pytest-mock>=3.12",
        ],
    },
    entry_points={
        "console_scripts": [
            "run-import=run_import.cli:main",
            "run-import-api=run_import.main:main",
        ],
    },
    author="Aiden Gindin",
    author_email="aiden@aidengindin.com",
    description="Import Health Export running activities into GraphJSON",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
