import re

MAX_ID_BYTES = 1500

_RESERVED_ID = re.compile(r"^__.*__$")


def is_valid_post_id(post_id: str) -> bool:
    """
    Check that a string can be used as a Firestore document id
    :return: True when the id is non-empty, at most 1500 bytes, has no '/',
        is not '.' or '..' and is not a reserved '__name__' id
    """
    if not post_id or post_id in (".", ".."):
        return False
    if "/" in post_id:
        return False
    if len(post_id.encode("utf-8")) > MAX_ID_BYTES:
        return False
    return _RESERVED_ID.match(post_id) is None
