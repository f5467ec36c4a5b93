"""
Constants
Diagnostic kinds and rule-set name collision policies.
"""

# ---------------------------------------------------------------------------
# Diagnostic kinds
# ---------------------------------------------------------------------------
MALFORMED_INCIDENT = "MALFORMED_INCIDENT"
AMBIGUOUS_RULESET_NAME = "AMBIGUOUS_RULESET_NAME"

ALL_DIAGNOSTIC_KINDS = frozenset({
    MALFORMED_INCIDENT,
    AMBIGUOUS_RULESET_NAME,
})


# ---------------------------------------------------------------------------
# Collision policies
# ---------------------------------------------------------------------------
# Applied when two rule sets share a name and both report incidents at the
# same location.
LAST_WINS = "last_wins"     # later rule set replaces the earlier view
FIRST_WINS = "first_wins"   # earlier view is kept, later incidents dropped
STRICT = "strict"           # raise RuleSetNameConflictError

ALL_COLLISION_POLICIES = frozenset({
    LAST_WINS,
    FIRST_WINS,
    STRICT,
})

DEFAULT_COLLISION_POLICY = LAST_WINS
