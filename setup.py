import re
import setuptools

with open('README.md', 'r') as rmd:
    long_description = rmd.read()

version = ''
with open('guildrest/__init__.py') as initpy:
    version = re.search(r'^__version__\s*=\s*[\'"]([^\'"]*)[\'"]', initpy.read(), re.MULTILINE).group(1)

if not version:
    raise RuntimeError('Version is not set.')

setuptools.setup(
    name='guildrest',
    version=version,
    author='shay (shayypy)',
    description='An asyncio binding in Python for the guild, channel, ban and pin REST endpoints of Discord-style chat APIs',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=['guildrest', 'guildrest.types'],
    license='MIT',
    classifiers=[
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Natural Language :: English'
    ],
    python_requires='>=3.8.0',
    install_requires=['aiohttp', 'typing_extensions'],
    extras_require={
        'test': ['pytest', 'pytest-asyncio'],
    },
)
