"""
Module products.

Lecture publique du catalogue (liste, fiche par slug, images binaires) et
écriture admin (création, mise à jour, suppression avec upload d'images).
"""
