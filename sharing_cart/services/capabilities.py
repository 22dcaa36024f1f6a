from collections.abc import Callable, Iterable
import logging

log = logging.getLogger(__name__)

RESTORE_COURSE = "moodle/restore:restorecourse"
RESTORE_ACTIVITY = "moodle/restore:restoreactivity"

# Cart actions that become unavailable when a capability is missing.
CAPABILITY_ACTIONS = {
    RESTORE_COURSE: "restore",
    RESTORE_ACTIVITY: "copy",
}


class StaticCapabilityChecker:
    """Capability decision computed by the host before rendering."""

    def __init__(self, granted: Iterable[str] = ()):
        self._granted = set(granted)

    def has_capability(self, capability: str) -> bool:
        return capability in self._granted


class RequiredCapabilities:
    def __init__(self, has_capability: Callable[[str], bool], capabilities: Iterable[str]):
        self._missing: list[str] = []
        for capability in capabilities:
            if capability in self._missing:
                continue
            if not self._check(has_capability, capability):
                self._missing.append(capability)

    @classmethod
    def init(cls, checker, capabilities: Iterable[str]) -> "RequiredCapabilities":
        return cls(checker.has_capability, capabilities)

    @staticmethod
    def _check(has_capability: Callable[[str], bool], capability: str) -> bool:
        try:
            return bool(has_capability(capability))
        except Exception:
            log.warning("Capability check for %s failed, treating as missing", capability, exc_info=True)
            return False

    def missing_capabilities(self) -> list[str]:
        return list(self._missing)

    def total_capabilities_missing(self) -> int:
        return len(self._missing)

    def disallowed_actions(self) -> list[str]:
        actions: list[str] = []
        for capability in self._missing:
            action = CAPABILITY_ACTIONS.get(capability, capability)
            if action not in actions:
                actions.append(action)
        return actions
