"""Owner and group name resolution from numeric ids."""

from __future__ import annotations

import grp
import logging
import pwd
from typing import Protocol

logger = logging.getLogger(__name__)


class NameResolver(Protocol):
    """Protocol for uid/gid to name lookup.

    Returning ``None`` means the id has no name; renderers show ``?``.
    """

    def user_name(self, uid: int) -> str | None: ...

    def group_name(self, gid: int) -> str | None: ...


class SystemNameResolver:
    """Resolve names from the user and group databases, caching each id."""

    def __init__(self) -> None:
        self._users: dict[int, str | None] = {}
        self._groups: dict[int, str | None] = {}

    def user_name(self, uid: int) -> str | None:
        if uid not in self._users:
            try:
                self._users[uid] = pwd.getpwuid(uid).pw_name
            except KeyError:
                logger.debug("No user name for uid %d", uid)
                self._users[uid] = None
        return self._users[uid]

    def group_name(self, gid: int) -> str | None:
        if gid not in self._groups:
            try:
                self._groups[gid] = grp.getgrgid(gid).gr_name
            except KeyError:
                logger.debug("No group name for gid %d", gid)
                self._groups[gid] = None
        return self._groups[gid]
