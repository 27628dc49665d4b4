"""Fonctions utilitaires partagées: slug et normalisation booléenne."""

import re
import unicodedata
from typing import Any, Optional

SLUG_FALLBACK = "produit"

# Caractères que la décomposition NFKD ne replie pas (locale fr)
FR_CHAR_MAP = {
    "&": " et ",
    "œ": "oe",
    "Œ": "oe",
    "æ": "ae",
    "Æ": "ae",
    "ß": "ss",
    "ø": "o",
    "Ø": "o",
}

# Valeurs acceptées comme "vrai" pour is_available (checkbox HTML, JSON, texte)
TRUTHY_AVAILABILITY = (True, "true", "on")


def slugify(name: str) -> str:
    """
    Transforme un nom en slug ASCII minuscule: "Café Crème" -> "cafe-creme".

    Retourne SLUG_FALLBACK si le nom ne contient aucun caractère alphanumérique.
    """
    s = "".join(FR_CHAR_MAP.get(ch, ch) for ch in name)
    n = unicodedata.normalize("NFKD", s)
    out = []
    for ch in n:
        if unicodedata.category(ch) == "Mn":
            continue
        out.append(ch if ord(ch) < 128 else "-")
    s = "".join(out).lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    s = re.sub(r"-{2,}", "-", s).strip("-")
    return s or SLUG_FALLBACK


def coerce_is_available(value: Any) -> Optional[bool]:
    """None reste None (champ absent), sinon True uniquement pour TRUTHY_AVAILABILITY."""
    if value is None:
        return None
    # 1 == True en Python: seules les chaînes et le vrai booléen sont comparés
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value in TRUTHY_AVAILABILITY
