"""
Errors
======
Exceptions raised to the immediate caller.  Nothing here is transient,
so nothing is ever retried.

    OversizedInputError      — incident ceiling exceeded, build rejected
    RuleSetNameConflictError — shared rule-set name under the strict policy
    ReportLoadError          — the report document could not be parsed
"""


class OversizedInputError(ValueError):
    def __init__(self, incident_count: int, ceiling: int) -> None:
        self.incident_count = incident_count
        self.ceiling = ceiling
        super().__init__(
            f"report has {incident_count} incidents, ceiling is {ceiling}"
        )


class RuleSetNameConflictError(ValueError):
    def __init__(self, ruleset_name: str, location: str,
                 first_index: int, second_index: int) -> None:
        self.ruleset_name = ruleset_name
        self.location = location
        self.first_index = first_index
        self.second_index = second_index
        super().__init__(
            f"rule sets #{first_index} and #{second_index} are both named "
            f"'{ruleset_name}' and both report incidents at {location}"
        )


class ReportLoadError(ValueError):
    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"cannot load report from {source}: {reason}")
