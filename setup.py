from setuptools import setup, find_namespace_packages

setup(
    name="reading_companion",
    version="0.1.0",
    packages=find_namespace_packages(include=['cli*', 'core*', 'api*']),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "Click",
        "SQLAlchemy>=2.0",
        "requests",
        "fastapi",
        "pydantic>=2",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",  # fastapi.testclient
        ],
    },
    entry_points={
        "console_scripts": [
            "shelf=cli.main:main",
        ],
    },
)
