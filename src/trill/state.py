"""Client-held UI state — local value coercion and the signed state token.

Locals are the client-visible UI state of a page. They round-trip through
the browser: serialized into ``_state_`` on every event response and
posted back as ``__state`` with the next event. Every value is kept in a
closed set of JSON-safe kinds so the token format stays well-defined.

The token is signed with ``itsdangerous`` so the client can carry it but
not forge it.
"""

import logging
import secrets
from collections.abc import Mapping
from typing import Any

from itsdangerous import BadData, URLSafeSerializer

logger = logging.getLogger("trill.state")

type LocalValue = str | int | float | bool | None | list[LocalValue] | dict[str, LocalValue]

STATE_SALT = "trill.state"


def coerce_local(value: Any) -> LocalValue:
    """Coerce *value* into a serializable local.

    Scalars pass through, sequences become lists, mappings become dicts
    with string keys (recursively). Anything else is stored as ``str(value)``.
    """
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return {str(k): coerce_local(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [coerce_local(v) for v in value]
    return str(value)


class StateCodec:
    """Sign and verify the locals token.

    An empty *secret_key* falls back to a random per-process key: state
    then works within one process but does not survive a restart.
    """

    __slots__ = ("_serializer",)

    def __init__(self, secret_key: str = "") -> None:
        if not secret_key:
            logger.warning(
                "No secret_key configured; UI state is signed with a per-process key"
            )
            secret_key = secrets.token_hex(32)
        self._serializer = URLSafeSerializer(secret_key, salt=STATE_SALT)

    def dumps(self, locals_: Mapping[str, LocalValue]) -> str:
        """Serialize and sign locals into an opaque token."""
        return self._serializer.dumps(dict(locals_))

    def loads(self, token: object) -> dict[str, LocalValue]:
        """Verify and decode a token. Tampered or unreadable tokens restore nothing."""
        if not token or not isinstance(token, str):
            return {}
        try:
            data = self._serializer.loads(token)
        except BadData:
            logger.warning("Discarding UI state with an invalid signature")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): coerce_local(v) for k, v in data.items()}
