"""Address → group key.  Failed attempts are aggregated per /24 block."""

SUBNET_SUFFIX = ".0/24"


def group_key(address: str) -> str:
    """``"10.0.0.7"`` → ``"10.0.0.0/24"``.

    Anything that does not split into exactly four dot-separated parts is
    its own singleton group and comes back unchanged.
    """
    parts = address.split(".")
    if len(parts) != 4:
        return address
    return ".".join(parts[:3]) + SUBNET_SUFFIX
