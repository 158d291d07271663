from setuptools import setup, find_packages

setup(
    name="manuslibros",
    version="1.0.0",
    packages=find_packages(include=["manuslibros", "manuslibros.*"]),
    install_requires=[
        "django>=4.0",
        "djangorestframework",
        "drf-spectacular",
        "djangorestframework-simplejwt",
        "psycopg2-binary",
        "python-decouple",
        "requests",
    ],
    extras_require={
        "tests": [
            "pytest",
            "pytest-django",
        ],
    },
    python_requires=">=3.11",
)
