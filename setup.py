from setuptools import setup, find_packages

setup(
    name="imap-roadrunner",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["IMAPClient>=2.3"],
    extras_require={
        "test": ["pytest>=7.0.0", "mypy>=1.10.0"],
    },
    python_requires=">=3.9",
    entry_points={
        "console_scripts": [
            "imap-roadrunner=imap_roadrunner.main:main",
        ],
    },
)
