from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="combitest",
    version="0.1.0",
    author="combitest contributors",
    description="Combinatorial test-case generation with hierarchical case names.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Framework :: Pytest",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"combitest": ["schemas/*.json"]},
    python_requires=">=3.10",
    install_requires=["pyyaml", "jsonschema", "pytest"],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["combitest = combitest.cli:main"]},
)
