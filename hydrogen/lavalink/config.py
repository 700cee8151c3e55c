"""Parser for the node list in the bot's Lavalink configuration."""

from __future__ import annotations

import re

from .errors import HydrolinkError
from .rest import Rest

_NODE = re.compile(r"((?:\[.+]|[^;:\n]+):[0-9]{1,5})@([^/;\n]+)(?:/([^;\n]+))?;?")


class ConfigParser:
    """Parses ``host:port@password[/tls]`` entries separated by ``;``."""

    def __init__(self, user_agent: str) -> None:
        self.user_agent = user_agent

    def parse(self, value: str) -> list[Rest]:
        """Build a REST client for each valid entry; invalid entries are skipped."""
        nodes = []
        for match in _NODE.finditer(value):
            host, password, query = match.groups()
            try:
                nodes.append(Rest(host, password, self.user_agent, query == "tls"))
            except HydrolinkError:
                continue
        return nodes