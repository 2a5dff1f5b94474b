"""
Setup configuration for the blob analysis package
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text() if readme_path.exists() else ""

setup(
    name="blob-analysis",
    version="0.1.0",
    description="Blob detection and bounds-safe region cropping for still images",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Blob Analysis Team",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        # CV dependencies
        "opencv-python>=4.8.1,<5.0",
        "numpy>=1.24.3",
        "Pillow>=10.1.0",
        "PyYAML>=6.0,<7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.3",
            "pytest-cov>=4.1.0",
            "scikit-image>=0.22.0",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
