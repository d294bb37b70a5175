from setuptools import setup, find_packages

setup(
    name='ls-lmsr-engine',
    version='0.1.0',
    packages=find_packages(include=['lslmsr', 'lslmsr.*']),
    install_requires=[
        'mpmath',
        'numpy',
        'python-dotenv',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
    description='Deterministic Python engine for LMSR and liquidity-scaled LMSR markets: fixed-point pricing, stepped trade simulation and trade application.',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.11',
)
