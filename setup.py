# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treeforge",
    version="1.0.0",
    description="Turn a pasted directory tree into real folders and empty files",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treeforge", "treeforge.*"]),
    package_data={"treeforge.interface.locales": ["*.json"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "customtkinter",  # GUI shell (src/treeforge/interface/gui)
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "treeforge=treeforge.main:main",
            "treeforge-cli=treeforge.interface.cli.app:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
