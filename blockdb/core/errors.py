"""
Erreurs du store de databases.

Trois cas seulement remontent à l'appelant:
- NotFound: database, propriété ou ligne absente (ou supprimée)
- InvalidState: invariant du schéma violé (ex: supprimer la dernière propriété)
- Conflict: collision d'identifiant / slug à l'insertion

La couche HTTP les traduit en 404 / 400 / 409 (voir main.py).
"""

from typing import Any, Dict, Optional


class BlockDbError(Exception):
    """Base de toutes les erreurs métier.

    Attributes:
        message: message lisible
        code: code pour le traitement côté client
        details: contexte additionnel
    """

    code = "BLOCKDB_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(BlockDbError):
    code = "NOT_FOUND"
    status_code = 404


class InvalidState(BlockDbError):
    code = "INVALID_STATE"
    status_code = 400


class Conflict(BlockDbError):
    code = "CONFLICT"
    status_code = 409
