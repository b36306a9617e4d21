import os
import sys

# Sphinx configuration for the wtmoments API reference.
# https://www.sphinx-doc.org/en/master/usage/configuration.html

project = 'wtmoments'
copyright = '2026, wtmoments developers'
author = 'wtmoments developers'
release = '0.1.0'

sys.path.insert(0, os.path.abspath('../..'))
extensions = [
    'sphinx.ext.autodoc',
    'sphinx.ext.autosummary',
    'sphinx.ext.napoleon',
    'sphinx.ext.mathjax',
    'sphinx.ext.doctest',
]

autosummary_generate = True
autodoc_default_options = {
    'members': True,
    'show-inheritance': True,
}

# NumPy-style docstrings throughout
napoleon_google_docstring = False
napoleon_numpy_docstring = True
napoleon_use_param = True
napoleon_use_rtype = True

templates_path = ['_templates']
exclude_patterns = []

html_theme = 'furo'
html_static_path = ['_static']
