"""Setup laravel_router."""

from setuptools import find_packages, setup

with open("README.md") as f:
    readme = f.read()


extra_reqs = {"test": ["pytest", "pytest-cov", "mock"]}


setup(
    name="laravel-router",
    version="2.0.1",
    description="Laravel-inspired route groups and named urls for Express-type apps",
    long_description=readme,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="routing router laravel express url-builder",
    license="MIT",
    packages=find_packages(exclude=["ez_setup", "example", "examples", "tests"]),
    include_package_data=True,
    zip_safe=False,
    extras_require=extra_reqs,
)
