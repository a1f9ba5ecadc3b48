from setuptools import setup, find_packages

setup(
    name="flipswap",
    version="0.1",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "flipswap-selfplay=flipswap.selfplay:main",
        ],
    },
)
