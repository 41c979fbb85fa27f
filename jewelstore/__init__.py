"""
Jewelstore Media — client-side media pipeline for the jewelry storefront admin.
"""

__version__ = "0.1.0"
