import ast
import os.path

from setuptools import setup


def extract_value(v):
    if isinstance(v, ast.Constant):
        return v.value
    elif isinstance(v, ast.Call):
        for a in v.args:
            r = extract_value(a)
            if r is not None:
                return r


def extract_vars_from_python_ast(a):
    res = {}
    for e in a.body:
        if isinstance(e, ast.Assign) and len(e.targets) == 1:
            n = e.targets[0]
            if isinstance(n, ast.Name):
                res[n.id] = extract_value(e.value)
    return res


def extract_vars_from_python_source(p):
    with open(p) as f:
        t = f.read()
    return extract_vars_from_python_ast(ast.parse(t))


this_dir = os.path.dirname(os.path.abspath(__file__))
author_info = extract_vars_from_python_source(os.path.join(this_dir, "pgpipe", "_author.py"))
setup(
    name="pgpipe",
    description="Layered OpenPGP encryption and signing pipelines on top of PGPy",
    version=author_info["__version__"],
    author=author_info["__author__"],
    license=author_info["__license__"],
    packages=["pgpipe"],
    python_requires=">=3.8",
    install_requires=[
        "cryptography>=3.3.2,<48",
        # PGPy 0.6.0 still imports imghdr, which is gone from the standard library in 3.13
        "PGPy>=0.6.0; python_version<'3.13'",
        "PGPy13; python_version>='3.13'",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
