from setuptools import setup, find_namespace_packages


setup(
    name='reservoir_amm',
    version='0.1',
    packages=find_namespace_packages(where="src", include=["reservoir_amm*"]),
    package_dir={"": "src"},
    python_requires=">=3.8",
    install_requires=[
        'pydantic>=2.0',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
