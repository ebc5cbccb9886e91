# setup.py
from setuptools import setup, find_packages

setup(
    name="page_scout",
    version="0.1.0",
    description="PageScout: отбор репрезентативных страниц сайта для аудита доступности",
    packages=find_packages(include=["page_scout", "page_scout.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "click>=8.1",
        "langchain-core>=0.3",
        "langchain-google-genai>=2.0",
        "lxml>=5.0",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": ["page-scout=page_scout.cli:cli"],
    },
    python_requires=">=3.11",
)
