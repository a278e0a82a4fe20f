# Private Diary: entry point, session state, FHE init and screen routing.
import logging

import streamlit as st

import contract
import diary
import fhe
import wallet
from state import DiaryState

APP_NAME = "Private Diary"
TAGLINE = "Mood journaling with FHE-encrypted values on-chain"
FOOTER_TEXT = "Your mood is encrypted with FHE. Only a verified decryption reveals it."
STATUS_REFRESH = "1s"

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

st.set_page_config(
    page_title=APP_NAME,
    page_icon="🌸",
    layout="centered",
    initial_sidebar_state="collapsed",
)

if "diary_state" not in st.session_state:
    st.session_state.diary_state = DiaryState()
if "fhe" not in st.session_state:
    st.session_state.fhe = fhe.FhevmClient()

state = st.session_state.diary_state
sdk = st.session_state.fhe


# --- Helpers ---

def _connect_env_wallet():
    if "env_wallet_checked" in st.session_state:
        return
    st.session_state.env_wallet_checked = True
    try:
        account = wallet.account_from_env()
    except ValueError as e:
        logger.warning("WALLET_PRIVATE_KEY ignored: %s", e)
        return
    if account is not None and not state.connected:
        state.connect(account.address, account)


def _init_fhe():
    if not state.connected or state.fhe_initialized or state.fhe_initializing or state.fhe_error:
        return
    state.start_fhe_init()
    try:
        logger.info("Initializing FHEVM for private diary...")
        sdk.initialize()
        state.finish_fhe_init()
        logger.info("FHEVM initialized successfully")
    except Exception:
        logger.exception("Failed to initialize FHEVM")
        state.fail_fhe_init()


def _load_initial():
    try:
        read_client = contract.get_contract_read_only()
        if read_client is not None:
            state.set_contract_address(read_client.address)
    except Exception:
        logger.exception("Failed to read contract address")
        read_client = None
    diary.load_data(state, read_client)
    state.end_refresh()


# Re-runs on its own so expired messages disappear without user input.
@st.fragment(run_every=STATUS_REFRESH)
def _render_status():
    status = state.visible_status()
    if status is None:
        return
    msg_col, close_col = st.columns([6, 1])
    with msg_col:
        if status["status"] == "success":
            st.success(status["message"], icon="✅")
        elif status["status"] == "error":
            st.error(status["message"], icon="❌")
        else:
            st.info(status["message"], icon="⏳")
    with close_col:
        if st.button("×", key="dismiss_status"):
            state.clear_status()
            st.rerun(scope="fragment")


def _render_header():
    title_col, action_col = st.columns([3, 1])
    with title_col:
        st.markdown(f"# {APP_NAME}")
        st.caption(f"{TAGLINE} · {state.address}")
    with action_col:
        if st.button("+ New entry", key="new_entry_btn", type="primary"):
            state.open_create_form()
            st.rerun()
        if st.button("Disconnect", key="disconnect_btn"):
            state.disconnect()
            st.rerun()


def main():
    _connect_env_wallet()
    mode = state.view_mode()

    if mode == "disconnected":
        st.markdown(f"# {APP_NAME}")
        st.markdown(f"**{TAGLINE}**")
        with st.container(key="connect_card"):
            account = wallet.render_connect()
            if account is not None:
                state.connect(account.address, account)
                st.rerun()
        _render_status()
        st.caption(FOOTER_TEXT)
        return

    if mode == "initializing":
        st.markdown("### Initializing FHE encryption system...")
        st.caption(f"Status: {'initializing FHEVM' if state.fhe_initializing else sdk.status}")
        _render_status()
        if state.fhe_error:
            if st.button("Retry", key="fhe_retry"):
                state.retry_fhe_init()
                st.rerun()
            return
        with st.spinner("Initializing FHEVM…"):
            _init_fhe()
        st.rerun()

    if mode == "loading":
        with st.spinner("Loading encrypted diary system..."):
            _load_initial()
        st.rerun()

    _render_header()
    _render_status()
    if state.show_create_form:
        from pages import create
        create.render(state, sdk)
        st.markdown("---")
    from pages import diaries
    diaries.render(state, sdk)
    st.caption(FOOTER_TEXT)


if __name__ == "__main__":
    main()
