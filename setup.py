from setuptools import setup, find_packages

setup(
    name="wmi-registry",
    version="0.1.0",
    description="Typed Windows Registry access through the WMI StdRegProv provider",
    author="",
    author_email="",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "pywin32>=306; sys_platform == 'win32'",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
)
