import attrs


@attrs.define(frozen=True)
class ReleaseExpiredHoldsResult:
    released: int
