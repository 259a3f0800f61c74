from setuptools import setup, find_packages
import re

# Read version from nylax/__init__.py
with open('nylax/__init__.py') as f:
    version = re.search(r'^__version__ = ["\']([^"\']+)["\']', f.read(), re.MULTILINE).group(1)

setup(
    name='nylas-access',
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'httpx>=0.24',
        'python-dotenv',
        'click>=8.0',
        'PyYAML',
        'click_option_group',
        'mcp>=1.0.0,<2',
    ],
    extras_require={
        'mcp': ['mcp>=1.0.0,<2'],
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'nylax=nylax.cli.__main__:main',
            'nylax-mcp=nylax.mcp.server:run_server',
        ],
    },
    author='CLI Developer',
    description='Nylas Access - SDK, CLI, and MCP server for the Nylas email/calendar API.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
)
