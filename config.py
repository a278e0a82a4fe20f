# Environment settings for the chain, contract and FHE relayer.
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

DEFAULT_RPC_URL = "http://127.0.0.1:8545"
DEFAULT_ABI_PATH = BASE_DIR / "diary_abi.json"
DEFAULT_TX_GAS = 3_000_000
DEFAULT_REQUEST_TIMEOUT = 30

SUCCESS_STATUS_SECONDS = 2
ERROR_STATUS_SECONDS = 3
RECENT_WINDOW_SECONDS = 60 * 60 * 24 * 7
BUSINESS_ID_PREFIX = "diary-"


def get_rpc_url() -> str:
    return os.environ.get("RPC_URL") or DEFAULT_RPC_URL


def get_contract_address() -> str | None:
    return os.environ.get("CONTRACT_ADDRESS") or None


def get_abi_path() -> Path:
    raw = os.environ.get("CONTRACT_ABI_PATH")
    return Path(raw) if raw else DEFAULT_ABI_PATH


def get_relayer_url() -> str | None:
    url = os.environ.get("RELAYER_URL")
    return url.rstrip("/") if url else None


def get_chain_id() -> int | None:
    raw = os.environ.get("CHAIN_ID")
    return int(raw) if raw else None


def get_wallet_private_key() -> str | None:
    return os.environ.get("WALLET_PRIVATE_KEY") or None


def get_tx_gas() -> int:
    raw = os.environ.get("TX_GAS")
    return int(raw) if raw else DEFAULT_TX_GAS


def get_request_timeout() -> float:
    raw = os.environ.get("REQUEST_TIMEOUT")
    return float(raw) if raw else DEFAULT_REQUEST_TIMEOUT
