# Id_Allocator.py
# Description: Collision-free allocation of 16-bit registry entry identifiers
#
# Imports
import random
from typing import List, Optional, Set
#
# 3rd-Party Imports
from loguru import logger
#
# Local Imports
from freemind_cli.Constants import MAX_ENTRY_ID
from freemind_cli.freemind_api.exceptions import FreemindError
#
########################################################################################################################
#
# Functions:

class IdSpaceExhaustedError(FreemindError, RuntimeError):
    """Raised when every non-zero 16-bit identifier is already in use."""
    pass


def allocate_id(existing_ids: Set[int], rng: Optional[random.Random] = None) -> int:
    """
    Draws a new identifier that is non-zero and not in `existing_ids`.

    The set is updated in place before returning, so successive calls against the
    same set never hand out the same identifier twice.

    Args:
        existing_ids: Identifiers already in use. Mutated.
        rng: Source of randomness exposing `randint`; defaults to the `random` module.

    Returns:
        The newly allocated identifier.

    Raises:
        IdSpaceExhaustedError: If no free identifier remains.
    """
    source = rng if rng is not None else random
    if len(existing_ids - {0}) >= MAX_ENTRY_ID:
        raise IdSpaceExhaustedError(f"All {MAX_ENTRY_ID} entry identifiers are in use.")

    new_id = 0
    while new_id == 0 or new_id in existing_ids:
        new_id = source.randint(0, MAX_ENTRY_ID)
    existing_ids.add(new_id)
    logger.trace(f"Allocated entry id {new_id} ({len(existing_ids)} ids in use)")
    return new_id


def allocate_ids(count: int, existing_ids: Set[int], rng: Optional[random.Random] = None) -> List[int]:
    """Allocates `count` identifiers, each disjoint from the others and from `existing_ids`."""
    if count < 0:
        raise ValueError("count must not be negative")
    return [allocate_id(existing_ids, rng) for _ in range(count)]

#
# End of Id_Allocator.py
########################################################################################################################
