#! python
# coding: utf-8

from setuptools import setup

setup(
    name='iserver',
    version='0.1',
    description="SuperMap iServer REST API wrapper",
    long_description="""Wrapper to the SuperMap iServer REST API: map queries, spatial analysis, themes and layer metadata""",
    author="iserver contributors",
    platforms="any",
    license="Apache Software License",
    packages=['iserver'],
    python_requires='>=3.6',
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Environment :: Web Environment',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Topic :: Internet :: WWW/HTTP',
        'Topic :: Scientific/Engineering :: GIS',
        'Topic :: Software Development :: Libraries :: Python Modules',
    ]
)
