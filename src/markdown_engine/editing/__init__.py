"""Edit interception: symbol pairing, header markers and list continuation."""

from .interceptor import EditInterceptor
from .models import EditResult, EditRule, ProposedEdit, RuleHandler
from .rules import DEFAULT_RULES, MATCH_WINDOW, find_matching_asterisk

__all__ = [
    "DEFAULT_RULES",
    "MATCH_WINDOW",
    "EditInterceptor",
    "EditResult",
    "EditRule",
    "ProposedEdit",
    "RuleHandler",
    "find_matching_asterisk",
]
