"""Setup script for the BringIt grocery backend."""

from setuptools import setup, find_packages

setup(
    name="bringit-grocery",
    version="1.0.0",
    description="Grocery delivery backend: API server, diagnostics and offline passthrough worker",
    author="BringIt",
    python_requires=">=3.10",
    packages=find_packages(include=["bringit", "bringit.*"]),
    package_data={
        "bringit.api": ["templates/*.html", "static/*"],
    },
    include_package_data=True,
    install_requires=[
        line.strip()
        for line in open("requirements.txt")
        if line.strip() and not line.startswith("#") and not line.startswith("git+")
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
        ],
        "dev": [
            "black>=23.0.0",
            "isort>=5.12.0",
            "flake8>=6.0.0",
            "mypy>=1.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "bringit=bringit.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: FastAPI",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
