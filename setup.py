from setuptools import setup, find_packages
setup(
    name='s3cli',
    version='0.1',
    description='Command line tool for managing buckets and objects in an S3 object store',
    packages=find_packages(exclude=['tests', 'tests.*']),
    entry_points={
        'console_scripts': ['s3cli=s3cli.cli:main'],
    },
    python_requires='>=3.8',
    install_requires = [
        'cmd2>=2,<3',
        'minio>=7.1',
        'urllib3',
        'python-dotenv',
        'pyreadline3;platform_system=="Windows"',
        ],
    extras_require = {
        'test': [
            'pytest',
            'pytest-mock',
            'docker',
            ],
        },
    )
