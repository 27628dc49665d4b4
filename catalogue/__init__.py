"""Catalogue API: catégories, produits et images servis pour le site et l'admin."""

__version__ = "1.0.0"
