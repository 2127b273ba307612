"""Terminal result of the launched child."""

from dataclasses import dataclass

from cyboot.constants import FAILURE_EXIT_CODE


@dataclass(frozen=True)
class ProcessOutcome:
    exit_code: int | None = None
    signal_name: str | None = None
    spawn_error: str | None = None

    def exit_status(self) -> int:
        """Map the outcome to this process's own exit code."""
        if self.spawn_error is not None or self.signal_name is not None:
            return FAILURE_EXIT_CODE
        if self.exit_code is None:
            return FAILURE_EXIT_CODE
        return self.exit_code
