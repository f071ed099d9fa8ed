from __future__ import annotations

import secrets
import string
import time


JOB_ID_PREFIX = "job_"

_ALPHABET = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def make_job_id(random_length: int = 8) -> str:
    """
    Build a job id: fixed prefix, random base36 part, then the creation time
    in milliseconds (base36) so ids also sort roughly by creation.
    """
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(random_length))
    return f"{JOB_ID_PREFIX}{random_part}{_to_base36(time.time_ns() // 1_000_000)}"
