from setuptools import setup, find_packages

setup(
    name='cavia-sdm',
    version='0.1.0',
    description='Species distribution modelling of guinea pigs under current and future climate',
    author='Matthew Whittle',
    author_email='matthewjwhittle@gmail.com',
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires='>=3.10',
    install_requires=[
        'numpy',
        'pandas',
        'geopandas',
        'shapely',
        'xarray>=2023.12',
        'rioxarray',
        'rasterio',
        'affine<3',
        'scikit-learn',
        'elapid',
        'pyarrow',
        'pydantic>=2',
        'pyyaml',
        'typer',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'cavia-sdm=cavia_sdm.cli:app',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering :: GIS',
    ],
)
