"""Setup script for the TruthChain content verification package"""

from pathlib import Path
from setuptools import find_packages, setup

readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

setup(
    name="truthchain",
    version="0.1.0",
    description="Verify text, URLs and images with AI and record verdicts on chain",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="truthchain",
    packages=find_packages(include=["truthchain", "truthchain.*"]),
    package_data={"truthchain.blockchain": ["truthchain_abi.json"]},
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0.0",
        "pydantic>=2.0",
        "aiohttp>=3.8",
        "flask>=2.2",
        "web3>=7.0",
        "pyyaml>=6.0",
        "python-dotenv>=1.0",
        "pillow>=9.0",
    ],
    extras_require={
        "image": [
            "transformers>=4.30",
            "torch>=2.0",
        ],
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "truthchain=truthchain.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
