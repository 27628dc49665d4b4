"""Exceptions personnalisées pour le module categories."""


class CategoryServiceException(Exception):
    """Erreur générique du service des catégories (lecture en base)."""
    def __init__(self, message: str = "Erreur lors de la récupération des catégories"):
        self.message = message
        super().__init__(self.message)
