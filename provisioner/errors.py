"""Errors raised while provisioning an environment. All of them end the run."""


class ProvisioningError(Exception):
    """Base class for fatal provisioning failures."""


class PortRangeExhausted(ProvisioningError):
    def __init__(self, label: str, range_min: int, range_max: int):
        self.label = label
        self.range_min = range_min
        self.range_max = range_max
        super().__init__(f"No available ports found in range {range_min}-{range_max} for {label}")


class PortConflictError(ProvisioningError):
    pass


class ReadinessTimeout(ProvisioningError):
    def __init__(self, description: str, attempts: int, message: str | None = None):
        self.description = description
        self.attempts = attempts
        super().__init__(message or f"{description} is not ready after {attempts} attempts")


class CommandFailed(ProvisioningError):
    def __init__(self, command: list[str], returncode: int, hint: str = ""):
        self.command = command
        self.returncode = returncode
        message = f"Command failed ({returncode}): {' '.join(command)}"
        if hint:
            message += f"\n{hint}"
        super().__init__(message)


class ProbeError(Exception):
    """A readiness probe could not get an answer. Treated as "not ready"."""
