from setuptools import setup

description = '''\
asyncio client for the UPnP ContentDirectory Browse action, as served by
DLNA media servers. Picks the best playable audio stream for each item.
'''

install_requires = [
    'aiohttp >= 3.8',
    'python-didl-lite >= 1.5.0',
]
cli_requires = [
    'click >= 8.1',
]
dev_requires = [
    'pyflakes',
    'pycodestyle',
    'mypy',
    'pytest >= 7.0.0',
    'pytest-asyncio >= 0.21.0',
    'click >= 8.1',
    'types-click',
]

setup(
    name='aiodlna',
    version='0.0',
    description='asyncio library for browsing DLNA media servers',
    long_description=description,
    author='Greg Ward',
    author_email='greg@gerg.ca',
    packages=['aiodlna'],
    python_requires='>=3.8',
    install_requires=install_requires,
    extras_require={
        'cli': cli_requires,
        'dev': dev_requires,
    },
    entry_points={
        'console_scripts': [
            'dlnatool = aiodlna.dlnatool:main',
        ],
    },
)
