from setuptools import setup, find_packages

setup(
    name="fns-lang",
    version="0.1.0",
    description="fns: a small expression-oriented scripting language interpreter",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="fns Project",
    python_requires=">=3.9",
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "fns=fns.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Interpreters",
    ],
)
