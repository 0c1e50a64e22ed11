"""Pack identifier lineage across repeated partial finishes."""

import re

_GENERATION_SUFFIX = re.compile(r"\*(\d+)$")


def next_pack_code(pack_id: str) -> str:
    """Identifier of the remainder pack split off ``pack_id``.

    ``A-1`` becomes ``A-1*2``; ``A-1*2`` becomes ``A-1*3``.
    """
    match = _GENERATION_SUFFIX.search(pack_id)
    if match:
        generation = int(match.group(1)) + 1
        return f"{pack_id[: match.start()]}*{generation}"
    return f"{pack_id}*2"
