"""Exception types raised by the route optimizer."""


class InputError(ValueError):
    """
    Raised when an optimization request is malformed.

    Covers place counts outside the supported range, invalid coordinates,
    non-positive durations or time budgets, malformed clock strings and
    negative preference weights. The orchestrator converts it into a
    structured failure result instead of letting it escape.
    """


class AlgorithmError(RuntimeError):
    """Raised when a search strategy fails or returns a malformed ordering."""

    def __init__(self, strategy: str, message: str):
        super().__init__(f"{strategy}: {message}")
        self.strategy = strategy
