from setuptools import setup


with open('README.md', 'r', encoding='utf-8') as readme:
    long_description = readme.read()


setup(
    name='zsgamesolver',
    version='1.0',
    description='Optimal mixed strategies for two-player zero-sum games',
    long_description=long_description,
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: Mathematics',
        'Intended Audience :: Science/Research',
    ],
    keywords='game theory, zero-sum games, minimax, mixed strategies, saddle point, dominance,'
             ' linear programming, simplex method',

    packages=['zsgamesolver', 'zsgamesolver.methods'],

    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
        'matplotlib',
    ],
    extras_require={
        'test': ['pytest'],
    },

    zip_safe=False,
)
