from setuptools import setup, find_packages

setup(
    name="htmlwasher",
    version="0.1.0",
    description="Policy-driven HTML sanitizer with YAML policies and built-in presets",
    author="Organized Crime and Corruption Reporting Project",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_dir={"htmlwasher": "htmlwasher"},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        # When you use this in production, pin the dependencies!
        "beautifulsoup4>=4.13.4",
        "PyYAML>=6.0",
        "jsonschema>=4.19",
        "servicelayer",
        "click>=8.2.1",
    ],
    extras_require={
        "dev": ["pytest>=8"],
    },
    license="MIT",
    zip_safe=False,
    test_suite="tests",
    entry_points={
        "console_scripts": ["htmlwasher = htmlwasher.cli:cli"],
    },
)
