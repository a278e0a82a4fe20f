import time

import pytest

from state import DiaryState

CONTRACT_ADDRESS = "0x00000000000000000000000000000000000D1A27"
USER_ADDRESS = "0x1111111111111111111111111111111111111111"


class FakePendingTx:
    def __init__(self, on_confirm=None, error=None):
        self.on_confirm = on_confirm
        self.error = error
        self.waited = False

    def wait(self):
        self.waited = True
        if self.error is not None:
            raise self.error
        if self.on_confirm is not None:
            self.on_confirm()


class FakeDiaryContract:
    """Read and write client over an in-memory record table."""

    address = CONTRACT_ADDRESS

    def __init__(self):
        self.records = {}
        self.handles = {}
        self.calls = []
        self.ids_error = None
        self.broken = set()
        self.create_error = None
        self.verify_error = None
        self.verified_elsewhere = None

    def add_record(self, business_id, title="Title", content="Content", mood=5, timestamp=None,
                   verified=False, decrypted=0, creator=USER_ADDRESS, handle=None):
        self.records[business_id] = {
            "name": title,
            "publicValue1": mood,
            "publicValue2": 0,
            "description": content,
            "creator": creator,
            "timestamp": int(time.time()) if timestamp is None else timestamp,
            "decryptedValue": decrypted,
            "isVerified": verified,
        }
        self.handles[business_id] = handle or "0x" + format(len(self.handles) + 1, "064x")
        return self.handles[business_id]

    # Read calls

    def get_all_business_ids(self):
        self.calls.append(("getAllBusinessIds",))
        if self.ids_error is not None:
            raise self.ids_error
        return list(self.records)

    def get_business_data(self, business_id):
        self.calls.append(("getBusinessData", business_id))
        if business_id in self.broken:
            raise RuntimeError(f"cannot decode {business_id}")
        return dict(self.records[business_id])

    def get_encrypted_value(self, business_id):
        self.calls.append(("getEncryptedValue", business_id))
        return self.handles[business_id]

    # Write calls

    def create_business_data(self, business_id, title, encrypted_data, proof, mood_value, reserved, content):
        self.calls.append(("createBusinessData", business_id, title, encrypted_data, proof,
                           mood_value, reserved, content))
        if self.create_error is not None:
            raise self.create_error

        def confirm():
            self.add_record(business_id, title=title, content=content, mood=mood_value, handle=encrypted_data)

        return FakePendingTx(confirm)

    def verify_decryption(self, business_id, clear_values_encoded, proof):
        self.calls.append(("verifyDecryption", business_id, clear_values_encoded, proof))
        if self.verified_elsewhere is not None:
            self.records[business_id].update(isVerified=True, decryptedValue=self.verified_elsewhere)
        if self.verify_error is not None:
            raise self.verify_error

        def confirm():
            self.records[business_id].update(isVerified=True, decryptedValue=int(clear_values_encoded))

        return FakePendingTx(confirm)

    def called(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeFhevm:
    def __init__(self):
        self.plaintexts = {}
        self.encrypt_calls = []
        self.verify_calls = []
        self.encrypt_error = None

    def encrypt(self, contract_address, user_address, value):
        self.encrypt_calls.append((contract_address, user_address, value))
        if self.encrypt_error is not None:
            raise self.encrypt_error
        handle = "0x" + format(0xE000 + len(self.encrypt_calls), "064x")
        self.plaintexts[handle] = value
        return {"encryptedData": handle, "proof": "0xfeed"}

    def verify_decryption(self, handles, contract_address, submit):
        self.verify_calls.append((list(handles), contract_address))
        clear = {h: self.plaintexts[h] for h in handles}
        tx = submit(str(clear[handles[0]]), "0xc0ffee")
        tx.wait()
        return {"decryptionResult": {"clearValues": clear}}


@pytest.fixture
def chain():
    return FakeDiaryContract()


@pytest.fixture
def sdk():
    return FakeFhevm()


@pytest.fixture
def state():
    s = DiaryState()
    s.connect(USER_ADDRESS)
    s.set_contract_address(CONTRACT_ADDRESS)
    s.finish_fhe_init()
    return s
