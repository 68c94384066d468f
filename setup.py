"""
Setup configuration for the restmachine-resources package.
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="restmachine-resources",
    version="0.1.0",
    author="RestMachine Contributors",
    author_email="contributors@restmachine.example.com",
    description="Rails-style resource controllers with policies, strong parameters and flash messages",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/restmachine",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=6.0",
            "pytest-cov",
            "ruff",
            "mypy",
            "types-PyYAML",
        ],
    },
    project_urls={
        "Bug Reports": "https://github.com/yourusername/restmachine/issues",
        "Source": "https://github.com/yourusername/restmachine",
    },
)
