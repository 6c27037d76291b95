import secrets
import string
from uuid import uuid4

SLUG_ALPHABET = string.ascii_letters + string.digits
SLUG_LENGTH = 10


def new_id() -> str:
    return str(uuid4())


def generate_slug_id() -> str:
    # identifiant court pour les URLs, immuable
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_LENGTH))
