"""Exceptions spécifiques au module products."""

from typing import Optional


class ProductDomainException(Exception):
    """Classe de base pour les exceptions du module products."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ProductNotFoundException(ProductDomainException):
    """Levée lorsqu'un produit n'est pas trouvé (par ID ou slug)."""
    def __init__(self, product_id: Optional[int] = None, slug: Optional[str] = None):
        self.product_id = product_id
        self.slug = slug
        if product_id is not None:
            super().__init__(f"Produit avec ID {product_id} non trouvé.")
        else:
            super().__init__(f"Produit avec slug '{slug}' non trouvé.")


class ImageNotFoundException(ProductDomainException):
    """Levée lorsqu'une image n'existe pas."""
    def __init__(self, image_id: int):
        super().__init__(f"Image avec ID {image_id} non trouvée.")
        self.image_id = image_id


class ProductReadException(ProductDomainException):
    """Echec d'une lecture en base (détail journalisé, jamais exposé)."""
    pass


class ProductValidationException(ProductDomainException):
    """Données admin invalides (champ requis manquant, type incorrect, etat inconnu)."""
    pass


class ProductCreationFailedException(ProductDomainException):
    """Levée lors d'un échec de la transaction de création."""
    pass


class ProductUpdateFailedException(ProductDomainException):
    """Levée lors d'un échec de la transaction de mise à jour."""
    pass


class ProductDeletionFailedException(ProductDomainException):
    """Levée lors d'un échec de la suppression."""
    pass


class UploadLimitException(ProductDomainException):
    """Fichier trop volumineux ou trop de fichiers: rejeté avant toute écriture."""
    def __init__(self, code: str, status_code: int, detail: str):
        super().__init__(detail)
        self.code = code
        self.status_code = status_code
