from setuptools import setup, find_packages

setup(
    name="recurring-transaction-detection",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "scikit-learn>=1.2.0",
        "pydantic>=2.0.0",
        "typing_extensions>=4.5.0",
        "python-dateutil>=2.8.2",
        "psutil>=5.9.0",
        "tzdata>=2023.3",
    ],
    extras_require={
        "dev": [
            "mypy>=1.0.0",
            "types-python-dateutil>=2.8.0",
            "types-psutil>=5.9.0",
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "isort>=5.0.0",
            "flake8>=6.0.0"
        ]
    }
)
