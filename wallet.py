# Signing account from a pasted key or the environment, and the connect form.
import logging

import streamlit as st
from eth_account import Account
from eth_account.signers.local import LocalAccount

import config

logger = logging.getLogger(__name__)


def load_account(private_key: str) -> LocalAccount:
    key = (private_key or "").strip()
    if not key:
        raise ValueError("Private key is required.")
    try:
        account = Account.from_key(key)
    except Exception as e:
        raise ValueError("Invalid private key.") from e
    logger.info("Wallet loaded: %s", account.address)
    return account


def account_from_env() -> LocalAccount | None:
    key = config.get_wallet_private_key()
    return load_account(key) if key else None


def render_connect() -> LocalAccount | None:
    """Render the connect form; returns the account once a key was accepted."""
    st.markdown("### Connect your wallet")
    st.markdown("Connect a wallet to initialize the encrypted diary system.")
    st.markdown(
        "1. Connect your wallet below\n"
        "2. The FHE system initializes automatically\n"
        "3. Start writing encrypted diary entries"
    )
    with st.form("connect_wallet"):
        key = st.text_input(
            "Private key", type="password", placeholder="0x…", key="wallet_key"
        )
        submitted = st.form_submit_button("Connect wallet")
        if submitted:
            try:
                return load_account(key)
            except ValueError as e:
                st.error(str(e))
    return None
