from setuptools import setup, find_packages

setup(
    name="salon-front-office",
    version="1.0.0",
    packages=find_packages(include=["salon_front_office", "salon_front_office.*"]),
    install_requires=[
        "pydantic>=2.0",
        "pydantic-settings>=2.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
