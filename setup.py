from setuptools import setup, find_packages
from pathlib import Path

setup(
    name="shape_annotator",
    version=Path(__file__).parent.joinpath("shape_annotator", "VERSION").read_text().strip(),
    packages=find_packages(include=["shape_annotator", "shape_annotator.*"]),
    package_data={"shape_annotator": ["VERSION"]},
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "opencv-python",
        "matplotlib",
        "easydict",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["shape_annotator=shape_annotator.cli:main"],
    },
)
