from setuptools import setup, find_packages

setup(
    name="autolegendas",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    package_dir={"": "."},
    install_requires=[
        'pandas',
        'pyreadstat',
        'requests',
        'tqdm',
    ],
    extras_require={
        'test': [
            'pytest>=7.0.0',
            'pytest-mock>=3.10.0',
            'pytest-cov>=4.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'autolegendas=autolegendas.etl_pipeline:main',
        ],
    },
    python_requires='>=3.8',
    description="Legendas (coligações e partidos) das eleições municipais brasileiras publicadas pelo TSE",
    long_description=open('README.md', encoding='utf-8').read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
)
