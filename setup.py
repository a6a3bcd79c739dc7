from glob import glob
from setuptools import setup


setup(
    name='hp41c',
    version='0.1.0',
    description='HP-41C RPN calculator keystroke emulator',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['hp41c'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
        ],
    },
    tests_require=[
        'pytest',
        'pytest-cov',
        'coverage',
        'flake8',
    ],
    scripts=glob('bin/*'),
    license='ISC',
)
