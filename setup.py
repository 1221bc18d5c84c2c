from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fp:
    long_description = fp.read()

setup(
    name="mcresolve",
    version="1.0.0",
    description="mcresolve is a module that resolves game versions' metadata, following their inheritance, "
                "into a launch specification for a platform.",
    author="mcresolve contributors",
    packages=["mcresolve"],
    url="https://github.com/mcresolve/mcresolve",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="GPL-3.0",
    python_requires=">=3.9",
    install_requires=["certifi"],
    extras_require={"test": ["pytest"]},
)
