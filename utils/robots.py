"""robots.txt directive scanning for AI crawler blocking."""

import re
from enum import Enum
from typing import Dict, Iterable, List, Tuple


class ScanState(Enum):
    """Position of the scanner relative to user-agent groups."""
    NO_AGENT = "no_agent"
    COLLECTING_AGENTS = "collecting_agents"
    IN_BLOCK = "in_block"


class LineKind(Enum):
    BLANK = "blank"
    COMMENT = "comment"
    USER_AGENT = "user_agent"
    DISALLOW_ALL = "disallow_all"
    ALLOW_ALL = "allow_all"
    OTHER = "other"


USER_AGENT_RE = re.compile(r'^User-agent:\s*(.+)$', re.IGNORECASE)
DISALLOW_ALL_RE = re.compile(r'^Disallow:\s*/\s*$', re.IGNORECASE)
ALLOW_ALL_RE = re.compile(r'^Allow:\s*/\s*$', re.IGNORECASE)

# Actions
ADD_AGENT = "add_agent"        # append the agent to the current group
APPLY = "apply"                # apply the directive to the current group
KEEP = "keep"                  # nothing to do

# (state, line kind) -> (action, next state)
TRANSITIONS: Dict[Tuple[ScanState, LineKind], Tuple[str, ScanState]] = {
    (ScanState.NO_AGENT, LineKind.BLANK): (KEEP, ScanState.NO_AGENT),
    (ScanState.NO_AGENT, LineKind.COMMENT): (KEEP, ScanState.NO_AGENT),
    (ScanState.NO_AGENT, LineKind.USER_AGENT): (ADD_AGENT, ScanState.COLLECTING_AGENTS),
    (ScanState.NO_AGENT, LineKind.DISALLOW_ALL): (KEEP, ScanState.NO_AGENT),
    (ScanState.NO_AGENT, LineKind.ALLOW_ALL): (KEEP, ScanState.NO_AGENT),
    (ScanState.NO_AGENT, LineKind.OTHER): (KEEP, ScanState.NO_AGENT),

    (ScanState.COLLECTING_AGENTS, LineKind.BLANK): (KEEP, ScanState.COLLECTING_AGENTS),
    (ScanState.COLLECTING_AGENTS, LineKind.COMMENT): (KEEP, ScanState.COLLECTING_AGENTS),
    (ScanState.COLLECTING_AGENTS, LineKind.USER_AGENT): (ADD_AGENT, ScanState.COLLECTING_AGENTS),
    (ScanState.COLLECTING_AGENTS, LineKind.DISALLOW_ALL): (APPLY, ScanState.IN_BLOCK),
    (ScanState.COLLECTING_AGENTS, LineKind.ALLOW_ALL): (APPLY, ScanState.IN_BLOCK),
    (ScanState.COLLECTING_AGENTS, LineKind.OTHER): (KEEP, ScanState.IN_BLOCK),

    # Once the group's first directive has been read the agent set is spent:
    # later directives apply to nobody and a new User-agent starts a new group.
    (ScanState.IN_BLOCK, LineKind.BLANK): (KEEP, ScanState.IN_BLOCK),
    (ScanState.IN_BLOCK, LineKind.COMMENT): (KEEP, ScanState.IN_BLOCK),
    (ScanState.IN_BLOCK, LineKind.USER_AGENT): (ADD_AGENT, ScanState.COLLECTING_AGENTS),
    (ScanState.IN_BLOCK, LineKind.DISALLOW_ALL): (KEEP, ScanState.IN_BLOCK),
    (ScanState.IN_BLOCK, LineKind.ALLOW_ALL): (KEEP, ScanState.IN_BLOCK),
    (ScanState.IN_BLOCK, LineKind.OTHER): (KEEP, ScanState.IN_BLOCK),
}


def classify_line(line: str) -> Tuple[LineKind, str]:
    """Classify a stripped robots.txt line; returns (kind, agent name or '')."""
    if not line:
        return LineKind.BLANK, ''
    if line.startswith('#'):
        return LineKind.COMMENT, ''
    match = USER_AGENT_RE.match(line)
    if match:
        return LineKind.USER_AGENT, match.group(1).strip()
    if DISALLOW_ALL_RE.match(line):
        return LineKind.DISALLOW_ALL, ''
    if ALLOW_ALL_RE.match(line):
        return LineKind.ALLOW_ALL, ''
    return LineKind.OTHER, ''


def scan_groups(robots_txt: str) -> Iterable[Tuple[List[str], LineKind]]:
    """
    Walk robots.txt and yield (agent group, directive) for every full-path
    Allow/Disallow that applies to an active agent group.

    Any text is accepted; unrecognised lines simply close the current group.
    """
    state = ScanState.NO_AGENT
    agents: List[str] = []

    for raw_line in (robots_txt or '').split('\n'):
        kind, agent = classify_line(raw_line.strip())
        action, next_state = TRANSITIONS[(state, kind)]

        if action == ADD_AGENT:
            if state != ScanState.COLLECTING_AGENTS:
                agents = []
            agents.append(agent)
        elif action == APPLY:
            yield list(agents), kind

        if next_state != ScanState.COLLECTING_AGENTS and state == ScanState.COLLECTING_AGENTS:
            agents = []
        state = next_state


class RobotsDirectiveAnalyzer:
    """
    Classifies reference AI crawlers as blocked or allowed by robots.txt.

    Wildcard handling is deliberately conservative: ``User-agent: *`` with
    ``Disallow: /`` blocks every reference crawler that does not have an
    explicit ``Allow: /`` inside its own dedicated group. No RFC 9309
    most-specific-match resolution is attempted.
    """

    def __init__(self, reference_crawlers: Iterable[str]):
        self.reference_crawlers = list(reference_crawlers)

    def has_explicit_allow(self, robots_txt: str, crawler: str) -> bool:
        """
        True when ``Allow: /`` follows a group whose last User-agent line names this crawler.

        Only the most recent agent line counts, so a shared group allows
        just its final agent.
        """
        crawler_lower = crawler.lower()
        for agents, directive in scan_groups(robots_txt):
            if directive != LineKind.ALLOW_ALL or not agents:
                continue
            if agents[-1].lower() == crawler_lower:
                return True
        return False

    def blocked_crawlers(self, robots_txt: str) -> List[str]:
        """Reference crawlers fully blocked, in first-blocked order, no duplicates."""
        blocked: List[str] = []

        def mark(crawler):
            if crawler not in blocked:
                blocked.append(crawler)

        for agents, directive in scan_groups(robots_txt):
            if directive != LineKind.DISALLOW_ALL:
                continue
            for agent in agents:
                if agent == '*':
                    for crawler in self.reference_crawlers:
                        if not self.has_explicit_allow(robots_txt, crawler):
                            mark(crawler)
                else:
                    for crawler in self.reference_crawlers:
                        if crawler.lower() == agent.lower():
                            mark(crawler)
        return blocked
