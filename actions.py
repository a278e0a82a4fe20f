# Create and decrypt flows: FHE SDK + contract calls, then a full reload.
import logging
import time

import config
import contract
import diary

logger = logging.getLogger(__name__)

MIN_MOOD = 1
MAX_MOOD = 10
CONNECT_WALLET_MESSAGE = "Please connect wallet first"

_last_id_ms = 0


# Millisecond ids, bumped past the last one issued so two quick submits never share an id.
def new_business_id(now_ms: int | None = None) -> str:
    global _last_id_ms
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    _last_id_ms = max(now_ms, _last_id_ms + 1)
    return f"{config.BUSINESS_ID_PREFIX}{_last_id_ms}"


def validate_diary_input(title: str, content: str, mood) -> int:
    if not (title or "").strip():
        raise ValueError("Title is required.")
    if not (content or "").strip():
        raise ValueError("Content is required.")
    try:
        mood_value = int(str(mood).strip())
    except (TypeError, ValueError) as e:
        raise ValueError("Mood must be a whole number.") from e
    if not MIN_MOOD <= mood_value <= MAX_MOOD:
        raise ValueError(f"Mood must be between {MIN_MOOD} and {MAX_MOOD}.")
    return mood_value


def _create_error_message(e: Exception) -> str:
    text = str(e)
    if "user rejected" in text.lower():
        return "Transaction rejected"
    return "Creation failed: " + (text or "Unknown error")


def _has_wallet(state) -> bool:
    if state.connected and state.address:
        return True
    state.set_status("error", CONNECT_WALLET_MESSAGE)
    return False


def create_diary(state, title: str, content: str, mood, sdk, read_client=None, write_client=None) -> bool:
    if not _has_wallet(state):
        return False
    try:
        mood_value = validate_diary_input(title, content, mood)
    except ValueError as e:
        state.set_status("error", str(e))
        return False

    state.start_create()
    try:
        write_client = write_client or contract.get_contract_with_signer(state.account)
        if write_client is None:
            raise RuntimeError("Failed to get contract with signer")
        business_id = new_business_id()
        encrypted = sdk.encrypt(state.contract_address or write_client.address, state.address, mood_value)
        tx = write_client.create_business_data(
            business_id,
            title.strip(),
            encrypted["encryptedData"],
            encrypted["proof"],
            mood_value,
            0,
            content.strip(),
        )
        state.set_status("pending", "Waiting for transaction confirmation...")
        tx.wait()
        logger.info("Created diary %s", business_id)
        state.set_status("success", "Diary created successfully!")
        diary.load_data(state, read_client)
        state.finish_create()
        return True
    except Exception as e:
        logger.exception("Diary creation failed")
        state.fail_create(_create_error_message(e))
        return False
    finally:
        state.end_create()


def _settled_value(state, business_id: str):
    entry = diary.find_entry(state.diaries, business_id)
    return entry["decryptedValue"] if entry and entry["isVerified"] else None


def decrypt_data(state, business_id: str, sdk, read_client=None, write_client=None):
    """Reveal the mood of `business_id` through a verified decryption.

    Returns the clear value, or None when nothing could be revealed. A record
    that is already verified is answered from the contract without the SDK.
    """
    if not _has_wallet(state):
        return None

    state.start_decrypt()
    try:
        read_client = read_client or contract.get_contract_read_only()
        if read_client is None:
            raise RuntimeError("Contract is not configured")
        data = read_client.get_business_data(business_id)
        if data.get("isVerified"):
            value = diary.to_entry(business_id, data)["decryptedValue"]
            state.set_status("success", "Data already verified")
            state.finish_decrypt(value)
            return value

        write_client = write_client or contract.get_contract_with_signer(state.account)
        if write_client is None:
            raise RuntimeError("Failed to get contract with signer")
        handle = read_client.get_encrypted_value(business_id)

        def submit(clear_values_encoded, decryption_proof):
            return write_client.verify_decryption(business_id, clear_values_encoded, decryption_proof)

        result = sdk.verify_decryption([handle], state.contract_address or read_client.address, submit)
        state.set_status("pending", "Verifying decryption...")
        clear_value = int(result["decryptionResult"]["clearValues"][handle])
        diary.load_data(state, read_client)
        state.set_status("success", "Data verified successfully!")
        state.finish_decrypt(clear_value)
        return clear_value
    except Exception as e:
        if "already verified" in str(e).lower():
            logger.info("Diary %s was already verified", business_id)
            state.set_status("success", "Data is already verified")
            diary.load_data(state, read_client)
            value = _settled_value(state, business_id)
            state.finish_decrypt(value)
            return value
        logger.exception("Decryption failed for %s", business_id)
        state.fail_decrypt()
        return None
    finally:
        state.end_decrypt()
