"""Integrates codeblock with Python's setuptools."""

from setuptools import setup, find_packages

from codeblock import _ROOT_DIRECTORY_PATH as ROOT_DIRECTORY_PATH

with open(ROOT_DIRECTORY_PATH / 'codeblock' / 'VERSION', encoding='utf-8') as f:
    VERSION = f.read().strip()

with open(ROOT_DIRECTORY_PATH / 'README.md', encoding='utf-8') as f:
    long_description = f.read()


extras_require_setuptools = [
    'setuptools ~= 68.2, >= 68.2.2',
    'twine ~= 4.0, >= 4.0.0',
    'wheel ~= 0.40, >= 0.40.0',
]


extras_require_development = [
    'autopep8 ~= 2.0, >= 2.0.2',
    'basedmypy ~= 2.0, >= 2.2.1',
    'coverage ~= 7.2, >= 7.2.4',
    'flake8 ~= 6.0, >= 6.0.0',
    'html5lib ~= 1.1',
    'pytest >= 7.3.1',
    'pytest-cov >= 4.0.0',
    'pytest-mock ~= 3.10, >= 3.10.0',
    'types-click ~= 7.1, >= 7.1.8',
    'types-Pygments >= 2.17.0.0',
    'types-pyyaml ~= 6.0, >= 6.0.6',
    'types-setuptools ~= 68.2, >= 68.2.0.0',
    *extras_require_setuptools,
]


SETUP = {
    'name': 'codeblock',
    'description': 'Jinja2 tags that render captioned, syntax-highlighted code blocks to HTML',
    'long_description': long_description,
    'long_description_content_type': 'text/markdown',
    'version': VERSION,
    'license': 'MIT',
    'classifiers': [
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Operating System :: MacOS :: MacOS X',
        'Operating System :: POSIX :: Linux',
        'Topic :: Internet :: WWW/HTTP :: Dynamic Content',
        'Topic :: Text Processing :: Markup :: HTML',
        'Typing :: Typed ',
    ],
    'python_requires': '~= 3.11',
    'install_requires': [
        'click ~= 8.1, >= 8.1.2',
        'jinja2 ~= 3.1, >= 3.1.1',
        'markupsafe >= 2.1.1',
        'Pygments ~= 2.15',
        'pyyaml ~= 6.0, >= 6.0.0',
        'typing-extensions >= 4.6.0',
    ],
    'extras_require': {
        'development': extras_require_development,
        'setuptools': extras_require_setuptools,
    },
    'entry_points': {
        'console_scripts': [
            'codeblock=codeblock.cli:main',
        ],
    },
    'packages': find_packages(include=['codeblock', 'codeblock.*']),
    'package_data': {
        'codeblock': ['VERSION', 'py.typed'],
    },
}

if __name__ == '__main__':
    setup(**SETUP)
