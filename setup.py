"""Setup script for the NMEA stream parser package."""

from setuptools import setup, find_packages

requires = ["click>=6.2", "pynmea2>=1.15.0"]

__version__ = None
exec(open("src/nmeastream/version.py").read())

setup(
    name="nmeastream",
    version=__version__,
    python_requires=">=3.9",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    install_requires=requires,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["nmea-decode = nmeastream.cli:nmea_decoder"]},
)
