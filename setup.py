"""
YTScribe: setuptools build script.

Usage:
    # Development (editable install):
    pip install -e .[test]

    # Run:
    ytscribe fetch "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
"""

from setuptools import setup, find_namespace_packages

APP_NAME = "ytscribe"

setup(
    name=APP_NAME,
    version="1.0.0",
    description="YouTube caption extraction with cached LLM translation",
    packages=find_namespace_packages(include=["ytscribe", "ytscribe.*"]),
    py_modules=["main"],
    install_requires=[
        "requests>=2.28.0",
        "openai>=1.0.0",
        "python-dotenv>=1.0.0",
        "typer>=0.9.0",
    ],
    extras_require={
        "test": ["pytest>=7.0", "httpx>=0.23.0"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "ytscribe=main:main",
        ],
    },
)
