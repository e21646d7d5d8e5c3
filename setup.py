"""
Setup script for learnpath-engine.

learnpath is the scoring engine behind an adaptive study tool. It covers:

1. Mastery - per-topic mastery updates from answered questions
2. Rewards - XP, levels and daily streaks
3. Planning - spaced-repetition reviews and weakest-first learning paths

The 'learnpath' command scores JSON answer batches and prints study paths.
"""

from setuptools import find_packages, setup

setup(
    name="learnpath-engine",
    version="0.3.0",
    description="Adaptive learning scoring engine: mastery, XP, spaced repetition and study paths",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Right Learning",
    packages=find_packages(include=["learnpath", "learnpath.*"]),
    python_requires=">=3.11",
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
            "learnpath=learnpath.cli.main:run",
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
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive mastery spaced-repetition gamification",
)
