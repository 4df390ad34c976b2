"""
Setup script for the dorm_assignment package.
"""
from setuptools import setup, find_packages

setup(
    name="dorm-assignment",
    version="1.0.0",
    description="Dormitory room assignment service",
    packages=find_packages(include=["dorm_assignment", "dorm_assignment.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi>=0.100.0",
        "pydantic>=2.0.0",
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        "python-jose[cryptography]>=3.3.0",
        "python-dotenv>=1.0.0",
        "bcrypt>=4.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.24.0",
        ],
    },
)
