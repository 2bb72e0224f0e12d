from setuptools import setup, find_packages

setup(
    name='codechat',
    version='0.1.0',
    license="Apache 2.0",
    description="codechat: chat client core for a coding agent, with inline A2UI surfaces",
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        'pydantic>=2.0',
        'PyYAML>=6.0',
        'click>=8.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.0',
            'pytest-asyncio>=0.21',
        ],
    },
    entry_points={
        'console_scripts': [
            'codechat-render=codechat.command.codechat_render:run',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.9',
)
