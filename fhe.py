# FHEVM relayer client: key fetch, input encryption and public decryption.
import logging

import requests

import config

logger = logging.getLogger(__name__)

ENCRYPTED_TYPE = "euint32"


class FhevmError(RuntimeError):
    pass


class FhevmClient:
    """Thin client for an FHE encryption gateway.

    Encryption happens on the gateway, not here: `encrypt` sends the clear
    value over HTTPS and the gateway returns the ciphertext handle plus the
    input proof the contract checks, so the gateway is trusted with plaintext.
    Public decryption returns the clear values together with an ABI-encoded
    copy and the KMS proof the contract needs for `verifyDecryption`;
    submitting that proof is left to the caller through the `submit` callback.
    """

    def __init__(self, relayer_url: str | None = None, session: requests.Session | None = None,
                 timeout: float | None = None):
        self.relayer_url = (relayer_url or config.get_relayer_url() or "").rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.get_request_timeout()
        self.status = "idle"

    @property
    def is_initialized(self) -> bool:
        return self.status == "ready"

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict:
        if not self.relayer_url:
            raise FhevmError("RELAYER_URL is not set.")
        url = f"{self.relayer_url}{path}"
        try:
            r = self.session.request(method, url, json=payload, timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise FhevmError(f"Relayer request to {path} failed: {e}") from e
        except ValueError as e:
            raise FhevmError(f"Relayer returned invalid JSON for {path}") from e

    def _require_ready(self) -> None:
        if not self.is_initialized:
            raise FhevmError("FHEVM is not initialized.")

    def initialize(self) -> None:
        if self.is_initialized:
            return
        if not self.relayer_url:
            self.status = "error"
            raise FhevmError("RELAYER_URL is not set.")
        self.status = "ready"
        logger.info("FHEVM initialized against %s", self.relayer_url)

    def encrypt(self, contract_address: str, user_address: str, value: int) -> dict:
        self._require_ready()
        data = self._request("POST", "/v1/encrypt", {
            "contractAddress": contract_address,
            "userAddress": user_address,
            "values": [{"type": ENCRYPTED_TYPE, "value": int(value)}],
        })
        handles = data.get("handles") or []
        if not handles or not data.get("inputProof"):
            raise FhevmError("Relayer returned no handle or input proof.")
        return {"encryptedData": handles[0], "proof": data["inputProof"]}

    def verify_decryption(self, handles: list, contract_address: str, submit) -> dict:
        """Decrypt `handles` publicly, then hand the proof to `submit`.

        `submit(abi_encoded_clear_values, decryption_proof)` must return a
        pending transaction; this call blocks until it is confirmed.
        """
        self._require_ready()
        data = self._request("POST", "/v1/public-decrypt", {
            "ciphertextHandles": list(handles),
            "contractAddress": contract_address,
        })
        clear_values = data.get("clearValues") or {}
        missing = [h for h in handles if h not in clear_values]
        if missing:
            raise FhevmError(f"Relayer did not decrypt {', '.join(missing)}")
        tx = submit(data.get("abiEncodedClearValues"), data.get("decryptionProof"))
        tx.wait()
        return {"decryptionResult": {
            "clearValues": clear_values,
            "abiEncodedClearValues": data.get("abiEncodedClearValues"),
            "decryptionProof": data.get("decryptionProof"),
        }}
