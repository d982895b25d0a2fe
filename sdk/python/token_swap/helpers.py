import json
import logging
from pathlib import Path

from solders.keypair import Keypair


def load_keypair(
    private_key: str | None = None, private_key_json_file: Path | None = None
) -> Keypair:
    """
    Loads a wallet from a base58 secret or from a json file holding the secret as an array of bytes.
    """
    if private_key:
        return Keypair.from_base58_string(private_key)
    if private_key_json_file is None:
        raise ValueError("Either a private key or a private key file is required")
    with open(private_key_json_file, "r") as f:
        return Keypair.from_bytes(json.load(f))


def configure_logger(verbose: bool = False, name: str = "token_swap") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    log_handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s:%(name)s:%(module)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_handler.setFormatter(formatter)
    logger.addHandler(log_handler)
    return logger
