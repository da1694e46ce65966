from setuptools import find_packages, setup

setup(
    name="dissect.bplist",
    version="1.0.0",
    description="A Dissect module implementing a parser for Apple binary property lists (bplist00)",
    packages=list(map(lambda v: "dissect." + v, find_packages("dissect"))),
    python_requires=">=3.9",
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "dump-bplist=dissect.bplist.tools.dump_bplist:main",
        ],
    },
)
