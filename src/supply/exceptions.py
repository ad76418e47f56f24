class SupplyError(Exception):
    """Token details could not be resolved."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Failed to get token details: {detail}")


class InvalidAddressError(SupplyError):
    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid token address format: {address}")


class SupplyUnavailableError(SupplyError):
    """Every total-supply accessor failed."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__("Could not determine total supply from contract")
