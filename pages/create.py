# New diary form: title, content and the mood that gets FHE-encrypted.
import streamlit as st

import actions


def render(state, sdk):
    st.markdown("### Write a new diary entry")
    st.caption("FHE 🔐 The mood value is encrypted with Zama FHE (whole numbers only).")
    with st.form("create_diary"):
        title = st.text_input("Title *", value=state.form["title"], placeholder="Give your entry a title...")
        content = st.text_area(
            "Content *", value=state.form["content"], placeholder="How did today feel?", height=140
        )
        mood = st.text_input(
            f"Mood ({actions.MIN_MOOD}-{actions.MAX_MOOD}) *", value=state.form["mood"], placeholder="7"
        )
        submit_col, cancel_col = st.columns(2)
        with submit_col:
            label = "Encrypting and saving…" if state.creating else "Save entry"
            submitted = st.form_submit_button(label, type="primary", disabled=state.creating)
        with cancel_col:
            cancelled = st.form_submit_button("Cancel")

    if cancelled:
        state.close_create_form()
        st.rerun()
    if submitted:
        state.update_form(title=title, content=content, mood=mood)
        with st.spinner("Encrypting mood and waiting for confirmation…"):
            actions.create_diary(state, state.form["title"], state.form["content"], state.form["mood"], sdk)
        st.rerun()
