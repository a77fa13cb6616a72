"""Setup script for the chamber_events occurrence engine."""

from pathlib import Path

from setuptools import find_packages, setup

# Requirements that are only needed to run the test suite
DEV_PACKAGES = ("pytest", "hypothesis")

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, separating development dependencies
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    content = requirements_file.read_text().strip()
    lines = content.split("\n")

    for line in lines:
        line = line.strip()
        # Skip empty lines and comments
        if not line or line.startswith("#"):
            continue

        if line.lower().startswith(DEV_PACKAGES):
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="chamber_events",
    version="1.0.0",
    description="Recurring event occurrence engine for a chamber of commerce events site",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Chamber Events Team",
    # Package configuration
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements,
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Office/Business :: Scheduling",
    ],
    keywords="calendar events recurrence rrule newsletter",
    entry_points={
        "console_scripts": [
            "chamber-events=chamber_events.__main__:main",
        ],
    },
    zip_safe=False,
)
