from setuptools import setup, find_packages

setup(
    name="pampam",
    version="0.1.0",
    packages=find_packages(include=["pampam", "pampam.*"]),
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.25.0",
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "pampam=pampam.cli:app",
        ],
    },
    zip_safe=False,
)
