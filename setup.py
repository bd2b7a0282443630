#!/usr/bin/env python3
"""
Setup script for Showroom.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="showroom",
    version="0.1.0",
    description="Back-office catalog API: users, categories, brands, products and menu",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Showroom Contributors",
    packages=find_packages(include=["showroom", "showroom.*"]),
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "uvicorn>=0.30.0",
        "python-dotenv>=1.0.0",
        "jinja2>=3.1.0",
        "cryptography>=41.0.0",
        "argon2-cffi>=23.1.0",
        "aiosqlite>=0.19.0",
        "aiofiles>=23.2.1",
        "aiosmtplib>=3.0.0",
        "orjson>=3.9.0",
        "python-multipart>=0.0.13",
        "click>=8.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "showroom=showroom.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Internet :: WWW/HTTP",
    ],
    keywords="catalog api asgi sqlite",
)
