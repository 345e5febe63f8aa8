import setuptools

with open('README.md', 'rt') as f:
    long_description = f.read()

setuptools.setup(
    name='fpcheck',
    version='0.0.0',
    description='data-driven validation of libm implementations against test vectors, with an MPFR reference',
    long_description=long_description,
    long_description_content_type='text/markdown',
    license='MIT',
    install_requires=['numpy>=1.23.0', 'gmpy2>=2.1.2'],
    extras_require={
        'test': ['pytest'],
    },
    packages=['fpcheck', 'fpcheck/numeric', 'fpcheck/arithmetic', 'fpcheck/engine', 'fpcheck/data'],
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Operating System :: POSIX :: Linux',
        'License :: OSI Approved :: MIT License',
    ],
)
