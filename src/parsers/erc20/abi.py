"""Minimal ERC-20 ABI plus the non-standard supply accessors some tokens expose."""


def _view(name: str, output_type: str) -> dict:
    return {
        "inputs": [],
        "name": name,
        "outputs": [{"name": "", "type": output_type}],
        "stateMutability": "view",
        "type": "function",
    }


ERC20_ABI = [
    _view("name", "string"),
    _view("symbol", "string"),
    _view("decimals", "uint8"),
    _view("totalSupply", "uint256"),
    # Alternative supply accessors (rebasing / capped designs)
    _view("getSupply", "uint256"),
    _view("supply", "uint256"),
    _view("cap", "uint256"),
]
