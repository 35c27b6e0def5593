from setuptools import setup, find_packages

setup(
    name="framonitor",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pyyaml",
        "pydantic>=2",
        "pandas",
        "pymongo",
        "gradio",
        "pdfplumber",
        "google-generativeai",
        "fastapi",
        "python-multipart",
        "uvicorn",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "framonitor=framonitor.cli:main",
        ],
    },
)
