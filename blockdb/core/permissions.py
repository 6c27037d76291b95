"""
Point d'accroche pour la couche d'autorisation.

Le store ne fait aucun contrôle de droits lui-même: chaque route qui modifie
quelque chose résout d'abord le space propriétaire de la cible puis appelle
le checker. Par défaut tout est autorisé, un déploiement remplace
`get_capability_checker` (dependency_overrides ou autre).
"""

from typing import Protocol
from fastapi import HTTPException, status
from blockdb.core.security import Actor

READ = "read"
EDIT = "edit"


class SpaceCapabilityChecker(Protocol):
    def __call__(self, actor: Actor, space_id: str, action: str) -> bool: ...


def allow_all(actor: Actor, space_id: str, action: str) -> bool:
    return True


def get_capability_checker() -> SpaceCapabilityChecker:
    return allow_all


def require_capability(checker: SpaceCapabilityChecker, actor: Actor, space_id: str, action: str = EDIT):
    if not checker(actor, space_id, action):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
