import setuptools
import os

# READMEファイルがあれば読み込む
long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()

# パッケージ設定
setuptools.setup(
    name="zipdir",
    version="1.0.0",
    author="ZipDir Team",
    description="List the contents of zip files, including nested zip files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    package_dir={"": "."},
    packages=setuptools.find_packages(where=".", include=["app", "app.*", "arc", "arc.*",
                                                          "logutils", "logutils.*", "proc", "proc.*"]),
    python_requires=">=3.8",
    install_requires=[
        "psutil>=5.8.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "zipdir=app.main:main",
        ],
    },
    include_package_data=True,
)
