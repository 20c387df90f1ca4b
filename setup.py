"""
Setup script for fact-universe.

Fact Universe is an arithmetic fact drill engine. It serves three roles:

1. Adaptive Practice - Per-fact mastery tracking with automatic level-up
2. Master Test - Timed grade-level fluency check against a target score
3. Duel - Two-player head-to-head multiple choice race

The 'fact-universe' command is the terminal harness around the engine.
"""

from setuptools import find_packages, setup

setup(
    name="fact-universe",
    version="1.0.0",
    description="Adaptive arithmetic fact drills with persistent per-fact mastery",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Fact Universe",
    packages=find_packages(exclude=["tests", "tests.*"]),
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
            "fact-universe=src.cli.fact_cli:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
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
    keywords="arithmetic math-facts spaced-repetition education drill",
)
