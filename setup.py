# type: ignore
from setuptools import find_packages, setup

# Get VERSION constant from ldfirehose.version - we can't simply import that module because
# ldfirehose/__init__.py imports the SDK and boto3, which may not be installed yet. Based on
# https://packaging.python.org/guides/single-sourcing-package-version/
version_module_globals = {}
with open('./ldfirehose/version.py') as f:
    exec(f.read(), version_module_globals)
ldfirehose_version = version_module_globals['VERSION']


def parse_requirements(filename):
    """ load requirements from a pip requirements file """
    lineiter = (line.strip() for line in open(filename))
    return [line for line in lineiter if line and not line.startswith("#")]


# e.g. ['boto3>=1.26.0', 'pyRFC3339>=1.0']
reqs = parse_requirements('requirements.txt')
testreqs = parse_requirements('test-requirements.txt')

setup(
    name='launchdarkly-server-sdk-firehose',
    version=ldfirehose_version,
    packages=find_packages(include=['ldfirehose', 'ldfirehose.*']),
    description='Exports LaunchDarkly experiment evaluations to Amazon Kinesis Data Firehose',
    long_description='Exports LaunchDarkly experiment evaluations to Amazon Kinesis Data Firehose',
    install_requires=reqs,
    python_requires='>=3.9',
    classifiers=[
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
    ],
    extras_require={
        "test": testreqs,
    },
)
