# Diary contract clients: read-only view calls and signer-backed transactions.
import json
import logging

from web3 import Web3

import config

logger = logging.getLogger(__name__)

_w3: Web3 | None = None
_abi: list | None = None


class TransactionFailed(RuntimeError):
    pass


def get_web3() -> Web3:
    global _w3
    if _w3 is None:
        _w3 = Web3(Web3.HTTPProvider(config.get_rpc_url()))
    return _w3


def load_abi() -> list:
    global _abi
    if _abi is None:
        _abi = json.loads(config.get_abi_path().read_text())
    return _abi


def _bind(w3: Web3, address: str):
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=load_abi())


def _to_bytes(value) -> bytes:
    if isinstance(value, str):
        return Web3.to_bytes(hexstr=value)
    return bytes(value)


def _output_names(abi: list, fn_name: str) -> list:
    for item in abi:
        if item.get("type") == "function" and item.get("name") == fn_name:
            return [o["name"] for o in item.get("outputs", [])]
    raise ValueError(f"{fn_name} not found in contract ABI.")


class PendingTransaction:
    """Handle for a sent transaction; wait() blocks until it is mined."""

    def __init__(self, w3: Web3, tx_hash):
        self._w3 = w3
        self.tx_hash = tx_hash

    @property
    def hash(self) -> str:
        return Web3.to_hex(self.tx_hash)

    def wait(self, timeout: float | None = None):
        receipt = self._w3.eth.wait_for_transaction_receipt(
            self.tx_hash, timeout=float("inf") if timeout is None else timeout
        )
        if receipt["status"] != 1:
            raise TransactionFailed(f"Transaction {self.hash} reverted.")
        logger.info("Transaction %s confirmed in block %s", self.hash, receipt["blockNumber"])
        return receipt


class ReadOnlyDiaryContract:
    def __init__(self, w3: Web3, address: str):
        self._w3 = w3
        self._contract = _bind(w3, address)
        self.address = self._contract.address

    def get_all_business_ids(self) -> list:
        return list(self._contract.functions.getAllBusinessIds().call())

    def get_business_data(self, business_id: str) -> dict:
        values = self._contract.functions.getBusinessData(business_id).call()
        return dict(zip(_output_names(load_abi(), "getBusinessData"), values))

    def get_encrypted_value(self, business_id: str) -> str:
        handle = self._contract.functions.getEncryptedValue(business_id).call()
        return Web3.to_hex(handle)


class DiaryContractWithSigner:
    def __init__(self, w3: Web3, address: str, account):
        self._w3 = w3
        self._contract = _bind(w3, address)
        self._account = account
        self.address = self._contract.address

    def _send(self, fn) -> PendingTransaction:
        chain_id = config.get_chain_id() or self._w3.eth.chain_id
        tx = fn.build_transaction({
            "chainId": chain_id,
            "from": self._account.address,
            "nonce": self._w3.eth.get_transaction_count(self._account.address),
            "gas": config.get_tx_gas(),
            "gasPrice": self._w3.eth.gas_price,
        })
        signed = self._account.sign_transaction(tx)
        tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
        logger.info("Sent transaction %s", Web3.to_hex(tx_hash))
        return PendingTransaction(self._w3, tx_hash)

    def create_business_data(self, business_id, title, encrypted_data, proof,
                             mood_value, reserved, content) -> PendingTransaction:
        return self._send(self._contract.functions.createBusinessData(
            business_id,
            title,
            _to_bytes(encrypted_data),
            _to_bytes(proof),
            int(mood_value),
            int(reserved),
            content,
        ))

    def verify_decryption(self, business_id, clear_values_encoded, proof) -> PendingTransaction:
        return self._send(self._contract.functions.verifyDecryption(
            business_id, _to_bytes(clear_values_encoded), _to_bytes(proof)
        ))


def get_contract_read_only() -> ReadOnlyDiaryContract | None:
    address = config.get_contract_address()
    if not address:
        logger.warning("CONTRACT_ADDRESS is not set.")
        return None
    return ReadOnlyDiaryContract(get_web3(), address)


def get_contract_with_signer(account) -> DiaryContractWithSigner | None:
    address = config.get_contract_address()
    if not address or account is None:
        return None
    return DiaryContractWithSigner(get_web3(), address, account)
