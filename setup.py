from setuptools import setup

test_require = ["pytest"]

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="protoavro",
    version="0.1.0",
    description="Decode Avro values into protocol buffer messages",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    packages=[
        "protoavro",
        "protoavro.bin",
        "protoavro.runtime",
    ],
    install_requires=["protobuf>=4.25,<6.33"],
    tests_require=test_require,
    extras_require={
        "test": test_require,
    },
    entry_points={
        "console_scripts": [
            "protoavro-cli=protoavro.bin.protoavro_cli:main",
        ]
    },
)
