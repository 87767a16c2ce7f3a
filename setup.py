"""Setup configuration for passive-scanner package."""

from setuptools import setup
from pathlib import Path

# Read version from __version__.py
version = {}
with open("passive_scanner/__version__.py") as f:
    exec(f.read(), version)

# Read long description from README
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
if requirements_file.exists():
    requirements = [
        line.strip()
        for line in requirements_file.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.startswith("#")
    ]

setup(
    name="passive-scanner",
    version=version["__version__"],
    author=version["__author__"],
    author_email="cybersec-team@example.com",
    description=version["__description__"],
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=[
        "passive_scanner",
        "passive_scanner.cli",
        "passive_scanner.scanners",
    ],
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "flake8>=6.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "passive-scanner=passive_scanner.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Information Technology",
        "Topic :: Security",
        "Topic :: Internet :: Proxy Servers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11",
    keywords="security scanner passive headers cookies cors mitmproxy",
    license=version["__license__"],
)
