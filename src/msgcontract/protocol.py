"""The join/leave protocol served by the demo host in ``msgcontract.main``."""
from __future__ import annotations

from typing import Literal, Union

from msgcontract.schema import Branch, define_messages

registry = define_messages({
    "join": {
        # what the host answers with
        "to_peer": Branch(
            {"id": str, "name": str, "etc": Branch({"key": str})},
            optional=["etc"],
        ),
        # what a peer asks for
        "to_host": {
            "id": Literal["1", "2", "3"],
            "name": Union[str, int, float],
        },
    },
    "leave": {
        "to_host": {"userId": str},
    },
    "error": {
        "to_peer": {"message": str, "path": str, "reason": str},
    },
})
