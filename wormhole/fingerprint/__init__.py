"""
Fingerprint collaborators.

A fingerprinter maps source text to an opaque token plus a list of
structural eigenvalues. The engine accepts any callable with that shape.
"""

from .structural import StructuralFingerprinter, syntax_tree_graph

__all__ = ['StructuralFingerprinter', 'syntax_tree_graph']
