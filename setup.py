"""
Setup script for tense-prioritizer.

Tense Prioritizer is the level-driven adaptive prioritization engine for
Spanish mood/tense practice. It serves two roles:

1. Library - core / review / exploration pools for item selection
2. Developer CLI - inspect plans, stages, gaps and weights from the terminal

The 'tense-prioritizer' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="tense-prioritizer",
    version="1.0.0",
    description="Level-driven adaptive mood/tense prioritization for CEFR learners",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests", "tests.*")),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tense-prioritizer=src.cli.prioritizer_cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning cefr spanish tense prioritization education",
)
