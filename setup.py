from setuptools import setup, find_packages

setup(
    name='clientquery',
    version='0.1.0',
    description='Client for the SharePoint ProcessQuery (CSOM) object protocol',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,

    license='Apache License 2.0',
    install_requires=[
        "httpx>=0.27",
        "pydantic>=2.0",
        "PyYAML",
        "python-dotenv",
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },

    classifiers=[
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
