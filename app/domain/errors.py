"""Domain exceptions."""


class DispatchError(Exception):
    """Base class for dispatch engine errors."""


class InvalidStateError(DispatchError):
    """An entity was asked to make a transition its current state forbids."""

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"{entity} cannot move from '{current}' to '{target}'")
        self.entity = entity
        self.current = current
        self.target = target


class DownstreamUnavailableError(DispatchError):
    """A notification or settlement gateway could not complete a call."""

    def __init__(self, gateway: str, detail: str):
        super().__init__(f"{gateway} unavailable: {detail}")
        self.gateway = gateway
        self.detail = detail
