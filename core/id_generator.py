import uuid

# Tables whose rows carry their own surrogate key
ENTITY_TABLES = {
    "users",
    "posts",
    "post_images",
    "comments",
}


def generate_id(entity: str) -> str:
    """Returns a 36-char UUID4 string for a row of the given table."""
    if entity not in ENTITY_TABLES:
        raise ValueError(f"Unknown entity for ID generation: {entity}")
    return str(uuid.uuid4())
