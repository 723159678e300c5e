"""Setup configuration for the snippetcheck package."""

import os
from setuptools import setup, find_packages

here = os.path.dirname(__file__)

# Read the README for the long description
readme_file = os.path.join(here, "README.md")
if os.path.exists(readme_file):
    with open(readme_file, "r", encoding="utf-8") as fh:
        long_description = fh.read()
else:
    long_description = ""

# Read version from package
version_file = os.path.join(here, "snippetcheck", "__init__.py")
with open(version_file) as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break
    else:
        version = "0.1.0"

setup(
    name="snippetcheck",
    version=version,
    description="Find unused and missing imports in TypeScript/JavaScript snippets embedded in MDX documentation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["snippetcheck", "snippetcheck.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Quality Assurance",
        "Topic :: Documentation",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "typing-extensions>=4.5",
        "pyyaml>=6.0",
        "click>=8.0",
        "rich>=13.0",
        "tree-sitter>=0.23",
        "tree-sitter-typescript>=0.23",
        "tree-sitter-javascript>=0.23",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "coverage>=6.0",
            "ruff>=0.1",
            "mypy>=1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "snippetcheck=snippetcheck.cli:main",
        ],
    },
    include_package_data=True,
    keywords=[
        "documentation",
        "static-analysis",
        "linting",
        "mdx",
        "typescript",
        "imports",
    ],
)
