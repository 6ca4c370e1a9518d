#!/usr/bin/env python3
"""
Setup script for testmail-inbox.

Install with `pip install .` or, for development, `pip install -e '.[dev]'`.
Installing the package registers the pytest plugin through the `pytest11`
entry point.
"""

import re
import sys
from pathlib import Path

if sys.version_info < (3, 11):
    sys.exit("Error: testmail-inbox requires Python 3.11 or higher.")

try:
    from setuptools import find_packages, setup
except ImportError:
    sys.exit("Error: setuptools is required. Install it with: pip install setuptools")

# Try to read version from __version__.py for consistency
try:
    version_file = Path(__file__).parent / "src" / "testmail_inbox" / "__version__.py"
    version_content = version_file.read_text(encoding="utf-8")
    version_match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', version_content, re.M)
    version = version_match.group(1) if version_match else "0.1.0"
except OSError:
    version = "0.1.0"

# Read long description from README if available
readme_path = Path(__file__).parent / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")
    long_description_content_type = "text/markdown"
else:
    long_description = "pytest plugin for end-to-end email testing with testmail.app"
    long_description_content_type = "text/plain"

# Core dependencies
install_requires = [
    "requests>=2.31.0",
    "pydantic>=2.5.0",
    "pydantic-settings>=2.1.0",
    "pytest>=7.4.0",
]

# Development dependencies
extras_require = {
    "dev": [
        "pytest-asyncio>=0.21.0",
        "pytest-cov>=4.1.0",
        "black>=23.0.0",
        "flake8>=6.1.0",
        "mypy>=1.7.0",
    ],
}

setup(
    name="testmail-inbox",
    version=version,
    description="pytest plugin for end-to-end email testing with testmail.app",
    long_description=long_description,
    long_description_content_type=long_description_content_type,
    author="testmail-inbox contributors",
    license="MIT",
    python_requires=">=3.11",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=install_requires,
    extras_require=extras_require,
    entry_points={
        "console_scripts": [
            "testmail-inbox=testmail_inbox.cli:main",
        ],
        "pytest11": [
            "testmail=testmail_inbox.plugin",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Framework :: Pytest",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Communications :: Email",
        "Topic :: Software Development :: Testing",
    ],
    keywords=["email", "testing", "e2e", "pytest", "testmail"],
)
