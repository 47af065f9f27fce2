from setuptools import setup, find_namespace_packages

setup(
    name='project_zip',
    version='0.1',
    package_dir={'': 'src'},
    packages=find_namespace_packages(where='src'),
    python_requires='>=3.9',
    install_requires=[
        'Click',
        'PyYAML',
        'pydantic>=2',
        'Jinja2',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-mock',
        ],
    },
    entry_points='''
        [console_scripts]
        project-zip=project_zip.cli:main
    ''',
)
