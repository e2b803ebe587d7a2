from setuptools import setup, find_packages

setup(
    name="nerdiversary",
    version="0.1.0",
    packages=find_packages(include=["nerdiversary", "nerdiversary.*"]),
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "cryptography",
        "requests",
        "redis",
        "celery",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
