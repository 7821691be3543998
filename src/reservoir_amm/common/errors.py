class PairError(ValueError):
    """Base class for every failure raised by a pair settlement or setter."""


class ParameterOutOfBounds(PairError):
    pass


class Forbidden(PairError):
    pass


class Paused(PairError):
    pass


class Locked(PairError):
    """A call re-entered a pair that is already executing."""


class Uninitialized(PairError):
    pass


class TimelockActive(PairError):
    pass


class InsufficientLiquidity(PairError):
    pass


class InsufficientLiquidityMinted(InsufficientLiquidity):
    pass


class InsufficientLiquidityBurned(InsufficientLiquidity):
    pass


class InsufficientReservoir(PairError):
    pass


class InsufficientInput(PairError):
    pass


class InsufficientOutput(PairError):
    pass


class InvalidRecipient(PairError):
    pass


class ReservoirBudgetExceeded(PairError):
    pass


class InvariantViolation(PairError):
    """Post-fee curve invariant decreased during a swap."""


class Overflow(PairError):
    pass
