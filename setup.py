from setuptools import setup, find_packages

setup(
    name="ahp_dss",
    version="0.1.0",
    package_dir={"": "ahp_library"},
    packages=find_packages("ahp_library"),
    install_requires=[
        'numpy>=1.20.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    description="A Python implementation of the Analytic Hierarchy Process (AHP) for Decision Support Systems.",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Decision Science"
    ],
    python_requires='>=3.8',
)
