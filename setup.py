from setuptools import setup, find_packages


setup(
    name="assetio",
    version="0.1",
    packages=find_packages(include=["assetio", "assetio.*"]),
    description="Packed, memory-mapped asset libraries addressed by hashed asset names.",
    author="vercingetorx",
    install_requires=[],
    entry_points={
        "console_scripts": [
            "assetio=assetio.cli:main",
        ]
    },
)
