from typing import Any, Callable
import logging

logger = logging.getLogger(__name__)


class ConstraintManager:
    def __init__(self, session, state: Any):
        self.session = session
        self.state = state
        self.rules: list[Callable] = []

    def add_rule(self, rule_func: Callable, condition: bool = True):
        """Register a rule with optional enablement condition."""
        if condition:
            self.rules.append(rule_func)

    def apply_all(self) -> int:
        """Apply all registered rules in order. Returns the number of assertions added."""
        start = len(self.session.assertions)
        for rule in self.rules:
            before = len(self.session.assertions)
            rule(self.session, self.state)
            logger.debug(f"{rule.__name__}: +{len(self.session.assertions) - before} constraints")
        added = len(self.session.assertions) - start
        logger.info(f"→ #constraints = {added},  #vars = {len(self.session.registry)}")
        return added
