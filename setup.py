"""
Setup script for the plotnine new scale package
"""

from setuptools import setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="plotnine-newscale",
    version="1.0.0",
    author="Your Organization",
    author_email="your-email@organization.com",
    description="Multiple color and fill scales in the same plotnine plot",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/your-org/plotnine-newscale",
    py_modules=[
        "new_aes",
        "bump_aes",
        "aes_names",
        "newscale_config",
        "newscale_logger",
    ],
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: Visualization",
    ],
    python_requires=">=3.10",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
            "mypy>=0.991",
        ],
    },
    include_package_data=True,
)
