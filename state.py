# UI state for the diary page; changed only through the transition methods below.
import time

import config

EMPTY_FORM = {"title": "", "content": "", "mood": ""}


class DiaryState:
    def __init__(self):
        self.connected = False
        self.address = None
        self.account = None
        self.contract_address = ""
        self.fhe_initialized = False
        self.fhe_initializing = False
        self.fhe_error = False
        self.loading = True
        self.is_refreshing = False
        self.diaries = []
        self.stats = {"totalEntries": 0, "verifiedEntries": 0, "avgMood": 0, "recentEntries": 0}
        self.selected = None
        self.decrypted_value = None
        self.show_create_form = False
        self.form = dict(EMPTY_FORM)
        self.creating = False
        self.decrypting = False
        self.status = None
        self.search_term = ""

    # --- Transaction status ---

    def set_status(self, kind: str, message: str, now: float | None = None) -> None:
        if kind not in ("pending", "success", "error"):
            raise ValueError(f"Unknown status kind: {kind}")
        now = time.time() if now is None else now
        ttl = {"success": config.SUCCESS_STATUS_SECONDS, "error": config.ERROR_STATUS_SECONDS}.get(kind)
        self.status = {
            "status": kind,
            "message": message,
            "expiresAt": None if ttl is None else now + ttl,
        }

    def clear_status(self) -> None:
        self.status = None

    def visible_status(self, now: float | None = None) -> dict | None:
        if self.status is None:
            return None
        now = time.time() if now is None else now
        expires = self.status["expiresAt"]
        if expires is not None and now >= expires:
            self.status = None
            return None
        return self.status

    # --- Connection and FHE ---

    def connect(self, address: str, account=None) -> None:
        self.connected = True
        self.address = address
        self.account = account
        self.loading = True

    def disconnect(self) -> None:
        self.__init__()
        self.loading = False

    def set_contract_address(self, address: str) -> None:
        self.contract_address = address or ""

    def start_fhe_init(self) -> None:
        self.fhe_initializing = True
        self.fhe_error = False

    def finish_fhe_init(self) -> None:
        self.fhe_initializing = False
        self.fhe_initialized = True

    def fail_fhe_init(self) -> None:
        self.fhe_initializing = False
        self.fhe_initialized = False
        self.fhe_error = True
        self.set_status("error", "FHEVM initialization failed")

    def retry_fhe_init(self) -> None:
        self.fhe_error = False

    # --- Loading ---

    def start_refresh(self) -> None:
        self.is_refreshing = True

    def finish_refresh(self, diaries: list, stats: dict) -> None:
        self.diaries = diaries
        self.stats = stats
        self.is_refreshing = False
        self.loading = False
        if self.selected is not None:
            self.selected = next((d for d in diaries if d["businessId"] == self.selected["businessId"]), self.selected)

    def fail_refresh(self) -> None:
        self.is_refreshing = False
        self.loading = False
        self.set_status("error", "Failed to load diaries")

    def end_refresh(self) -> None:
        self.is_refreshing = False
        self.loading = False

    # --- Create ---

    def open_create_form(self) -> None:
        self.show_create_form = True

    def close_create_form(self) -> None:
        self.show_create_form = False

    def update_form(self, **fields) -> None:
        for name, value in fields.items():
            if name not in EMPTY_FORM:
                raise ValueError(f"Unknown form field: {name}")
            if name == "mood":
                value = "".join(ch for ch in str(value) if ch.isdigit())
            self.form[name] = value

    def start_create(self) -> None:
        self.creating = True
        self.set_status("pending", "Creating encrypted diary entry...")

    def finish_create(self) -> None:
        self.creating = False
        self.show_create_form = False
        self.form = dict(EMPTY_FORM)

    def fail_create(self, message: str) -> None:
        self.creating = False
        self.set_status("error", message)

    def end_create(self) -> None:
        self.creating = False

    # --- Selection and decrypt ---

    def select_entry(self, entry: dict) -> None:
        self.selected = entry
        self.decrypted_value = None

    def clear_selection(self) -> None:
        self.selected = None
        self.decrypted_value = None

    def start_decrypt(self) -> None:
        self.decrypting = True

    def finish_decrypt(self, value) -> None:
        self.decrypting = False
        if value is not None:
            self.decrypted_value = value

    def fail_decrypt(self) -> None:
        self.decrypting = False
        self.set_status("error", "Decryption failed")

    def end_decrypt(self) -> None:
        self.decrypting = False

    # --- Derived ---

    def view_mode(self) -> str:
        if not self.connected:
            return "disconnected"
        if not self.fhe_initialized or self.fhe_initializing:
            return "initializing"
        if self.loading:
            return "loading"
        return "ready"

    def filtered_diaries(self) -> list:
        term = (self.search_term or "").lower()
        if not term:
            return list(self.diaries)
        return [d for d in self.diaries if term in d["title"].lower() or term in d["content"].lower()]
