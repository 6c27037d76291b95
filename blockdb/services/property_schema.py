"""
Schéma des propriétés - opérations sur la liste ordonnée des colonnes.

Ces fonctions ne touchent pas à la base: elles prennent la liste actuelle et
renvoient une nouvelle liste. Le database_service fait la lecture et
l'écriture dans la même transaction.

Règles:
- l'id d'une propriété ne change jamais (renommer/retyper garde l'id)
- une database a toujours au moins une propriété
- retyper ne convertit pas les valeurs déjà stockées dans les lignes
"""

import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from blockdb.core.errors import InvalidState, NotFound
from blockdb.schemas.property import PropertyDefinition, PropertyOptions, PropertyType

# champs modifiables par update_property
UPDATABLE_FIELDS = ("name", "type", "width", "options")


def load_properties(raw: Optional[Iterable[Any]]) -> List[PropertyDefinition]:
    # JSON stocké -> modèles (accepte aussi une liste déjà parsée)
    if not raw:
        return []
    return [p if isinstance(p, PropertyDefinition) else PropertyDefinition.model_validate(p) for p in raw]


def dump_properties(properties: List[PropertyDefinition]) -> List[dict]:
    return [p.to_storage() for p in properties]


def find_property(properties: List[PropertyDefinition], property_id: str) -> PropertyDefinition:
    for prop in properties:
        if prop.id == property_id:
            return prop
    raise NotFound("Property not found", {"property_id": property_id})


def append_property(
    properties: List[PropertyDefinition],
    name: str,
    type: PropertyType,
    options: Optional[PropertyOptions] = None
) -> List[PropertyDefinition]:
    """Ajoute une colonne en fin de liste avec un id neuf"""
    new_property = PropertyDefinition(name=name, type=PropertyType(type), options=options)
    return list(properties) + [new_property]


def replace_property(properties: List[PropertyDefinition], property_id: str, changes: Dict[str, Any]) -> List[PropertyDefinition]:
    """Remplace seulement les champs fournis, la position dans la liste ne bouge pas"""
    find_property(properties, property_id)

    updates = {}
    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            continue
        # name et type ne peuvent pas être vidés
        if field in ("name", "type") and value is None:
            continue
        if field == "type":
            value = PropertyType(value)
        elif field == "options" and value is not None and not isinstance(value, PropertyOptions):
            value = PropertyOptions.model_validate(value)
        updates[field] = value

    return [p.model_copy(update=updates) if p.id == property_id else p for p in properties]


def remove_property(properties: List[PropertyDefinition], property_id: str) -> List[PropertyDefinition]:
    remaining = [p for p in properties if p.id != property_id]
    if len(remaining) == len(properties):
        raise NotFound("Property not found", {"property_id": property_id})
    if not remaining:
        raise InvalidState("Cannot delete the last property", {"property_id": property_id})
    return remaining


def reorder(properties: List[PropertyDefinition], property_ids: List[str]) -> List[PropertyDefinition]:
    """Nouvel ordre d'affichage: property_ids doit être une permutation des ids actuels"""
    by_id = {p.id: p for p in properties}
    for property_id in property_ids:
        if property_id not in by_id:
            raise NotFound("Property not found", {"property_id": property_id})
    if len(set(property_ids)) != len(property_ids) or len(property_ids) != len(properties):
        raise InvalidState("Property order must list every property exactly once")
    return [by_id[property_id] for property_id in property_ids]


# ============ VALIDATION DES VALEURS ============

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://\S+$")


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        datetime.fromisoformat(value)
    except ValueError:
        try:
            date.fromisoformat(value)
        except ValueError:
            return False
    return True


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


VALUE_CHECKS = {
    PropertyType.TEXT: lambda v: isinstance(v, str),
    PropertyType.NUMBER: _is_number,
    PropertyType.SELECT: lambda v: isinstance(v, str),
    PropertyType.MULTI_SELECT: _is_str_list,
    PropertyType.DATE: _is_date,
    PropertyType.CHECKBOX: lambda v: isinstance(v, bool),
    PropertyType.URL: lambda v: isinstance(v, str) and bool(URL_RE.match(v)),
    PropertyType.EMAIL: lambda v: isinstance(v, str) and bool(EMAIL_RE.match(v)),
    PropertyType.PERSON: _is_str_list,
    PropertyType.FILES: _is_str_list,
}


def validate_property_values(properties: List[PropertyDefinition], values: Dict[str, Any]) -> List[str]:
    """Validation souple des valeurs d'une ligne contre le schéma.

    Renvoie la liste des problèmes trouvés (vide si tout va bien), ne lève
    rien: c'est à l'appelant de décider s'il refuse ou s'il stocke quand même.
    None efface une valeur et passe toujours. formula et relation ne sont
    jamais vérifiés.
    """
    by_id = {p.id: p for p in properties}
    issues = []
    for property_id, value in values.items():
        prop = by_id.get(property_id)
        if prop is None:
            issues.append(f"unknown property {property_id}")
            continue
        if value is None:
            continue
        check = VALUE_CHECKS.get(prop.type)
        if check is None:
            continue
        if not check(value):
            issues.append(f"{prop.name} ({prop.type.value}): unexpected value {value!r}")
            continue
        if prop.type in (PropertyType.SELECT, PropertyType.MULTI_SELECT) and prop.options and prop.options.options is not None:
            allowed = set(prop.options.option_ids())
            chosen = [value] if prop.type == PropertyType.SELECT else value
            unknown = [v for v in chosen if v not in allowed]
            if unknown:
                issues.append(f"{prop.name} ({prop.type.value}): unknown option {', '.join(unknown)}")
    return issues
