import os
import re
import setuptools


HERE = os.path.abspath(os.path.dirname(__file__))


def read(*parts: str) -> str:
    with open(os.path.join(HERE, *parts), encoding="utf-8") as f:
        return f.read()


VERSION = re.search(r"^__version__ = ['\"]([^'\"]+)['\"]", read("inventory_core", "__init__.py"), re.M).group(1)


setuptools.setup(
    name="inventory_core",
    version=VERSION,
    packages=setuptools.find_packages(include=["inventory_core", "inventory_core.*"]),
    package_data={
        "inventory_core.persistence": ["alembic/*.py", "alembic/*.mako", "alembic/versions/*.py"]
    },
    author="Raphael Horber",
    description="Backend of a household inventory with categories, articles, lots and stocktaking",
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    license="MIT",
    install_requires=[
        "alembic>=1.12,<2.0",
        "fastapi>=0.100.0,<0.137",
        "pydantic>=2.4,<3.0",
        "pydantic-settings>=2.2,<3.0",
        "requests>=2.27.0,<3.0",
        "SQLAlchemy>=2.0,<3.0",
        "uvicorn>=0.20.0,<1.0"
    ],
    extras_require={
        "test": [
            "httpx>=0.24,<1.0",
            "pytest>=7.0"
        ]
    },
    entry_points={
        "console_scripts": ["inventory-core=inventory_core.__main__:main"]
    },
    python_requires=">=3.8",
    classifiers=[
        "Operating System :: OS Independent",
        "License :: OSI Approved :: MIT License",
        "Framework :: FastAPI",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta"
    ]
)
