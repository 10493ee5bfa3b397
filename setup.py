from setuptools import setup, find_packages


setup(
    name="merkleproof",
    version="0.1",
    packages=find_packages(include=["merkleproof", "merkleproof.*"]),
    description="Keccak Merkle trees with domain-separated hashing and compact packed membership proofs.",
    install_requires=[
        "pycryptodomex>=3.23.0",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "merkleproof=merkleproof.cli:main",
        ]
    },
)
