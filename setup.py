#!/usr/bin/env python
# -*- coding: utf-8 -*-


from setuptools import setup


with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read().replace('.. :changelog:', '')

requirements = [
    'boto3',
    'botocore',
    'PyYAML',
    'requests',
]

test_requirements = [
    'mock',
    'pytest',
]


setup(
    name='ecs-broker',
    version='0.1.0',
    description="Cloud Foundry service broker provisioning on ECS",
    long_description=readme + '\n\n' + history,
    url='https://github.com/example/ecs-broker',
    packages=[
        'ecs_broker',
        'ecs_broker.management',
    ],
    include_package_data=True,
    install_requires=requirements,
    extras_require={'test': test_requirements},
    python_requires='>=3.8',
    license="Apache License 2.0",
    zip_safe=False,
    keywords='ecs cloudfoundry service-broker',
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
    ],
    test_suite='tests',
    tests_require=test_requirements
)
