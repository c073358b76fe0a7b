from setuptools import setup

setup(
    name="emblem",
    version="0.1.0",
    description="Indentation-based markup that compiles to HTML and Handlebars templates",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['emblem'],
    python_requires=">=3.7",
    install_requires=[
        "watchdog",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
