from setuptools import setup, find_packages

with open('requirements.txt') as f:
    required = f.read().splitlines()

setup(
    name='pentos_bot',
    version='0.1',
    packages=find_packages(exclude=['tests']),
    py_modules=['run_game'],
    description='A greedy placement engine for the Pentos city-building game.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    python_requires='>=3.8',
    install_requires=required,
    extras_require={'test': ['pytest']},
)
