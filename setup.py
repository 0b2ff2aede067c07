#!/usr/bin/env python
from setuptools import find_packages, setup

VERSION = "0.1.0"
INSTALL_REQUIREMENTS = [
    "Django>=4.2",
    "celery[redis]>=5.3",
    "kombu>=5.3",
    "django-celery-beat",
    "djangorestframework",
    "requests",
    "defusedxml",
    "structlog",
    "django-structlog",
    "sentry-sdk",
    "psycopg2-binary",
]
TEST_REQUIREMENTS = ["pytest", "pytest-django"]
SCRIPTS = ["manage.py"]
DESCRIPTION = "Scheduled import of job listings from external RSS feeds"
CLASSIFIERS = """\
Environment :: Web Environment
Framework :: Django
Programming Language :: Python
Programming Language :: Python :: 3.10
""".splitlines()

with open("README.md", "r") as f:
    LONG_DESCRIPTION = f.read()


setup(
    name="jobfeeds",
    version=VERSION,
    description=DESCRIPTION,
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    include_package_data=True,
    scripts=SCRIPTS,
    install_requires=INSTALL_REQUIREMENTS,
    extras_require={"test": TEST_REQUIREMENTS},
    python_requires=">=3.10",
    classifiers=CLASSIFIERS,
)
