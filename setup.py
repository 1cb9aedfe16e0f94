from setuptools import setup, find_packages

setup(
    name="fintrack",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "alembic", "alembic.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy",
        "alembic",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt==4.0.1",
        "email-validator",
        "redis",
        "celery",
        "kombu",
        "prometheus-client",
        "python-dotenv",
        "pydantic",
        "pydantic-settings",
        "websockets",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
            "fakeredis",
        ],
    },
)
