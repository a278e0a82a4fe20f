# Diaries tab: stats, mood chart, searchable list and the entry detail panel.
import streamlit as st
from datetime import datetime

import actions
import diary

PREVIEW_CHARS = 100
FHE_STEPS = [
    ("Mood encryption", "The mood value is encrypted with FHE before it leaves you."),
    ("On-chain storage", "The ciphertext is stored on the blockchain."),
    ("Offline decryption", "The relayer decrypts the value off-chain."),
    ("On-chain verification", "The decryption proof is verified by the contract."),
]


def _render_stats(stats):
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Total entries", stats["totalEntries"], f"+{stats['recentEntries']} this week")
    with c2:
        st.metric("Verified entries", f"{stats['verifiedEntries']}/{stats['totalEntries']}")
        st.caption("FHE protected")
    with c3:
        st.metric("Avg mood", f"{stats['avgMood']:.1f}/10")
        st.caption("Encrypted")


def _render_fhe_info():
    with st.expander("🔐 FHE encryption flow"):
        for i, (title, text) in enumerate(FHE_STEPS, start=1):
            st.markdown(f"**{i}. {title}**: {text}")


def _render_row(state, d):
    selected = state.selected is not None and state.selected["businessId"] == d["businessId"]
    with st.container(border=True):
        title_col, badge_col = st.columns([4, 1])
        with title_col:
            st.markdown(f"**{d['title']}**" + (" ·  selected" if selected else ""))
        with badge_col:
            st.markdown("✅ Verified" if d["isVerified"] else "🔓 Pending")
        st.write(d["content"][:PREVIEW_CHARS] + ("..." if len(d["content"]) > PREVIEW_CHARS else ""))
        date_str = datetime.fromtimestamp(d["date"]).strftime("%Y-%m-%d")
        st.caption(f"Mood: {d['mood']}/10 · Date: {date_str}")
        if st.button("Open", key=f"open_{d['businessId']}"):
            state.select_entry(d)
            st.rerun()


def _render_detail(state, sdk):
    d = state.selected
    st.markdown(f"### {d['title']}")
    if st.button("× Close", key="close_detail"):
        state.clear_selection()
        st.rerun()
    st.write(d["content"])
    st.caption(f"Creator: {d['creator']} · {datetime.fromtimestamp(d['date']).strftime('%B %d, %Y %H:%M')}")

    if d["isVerified"]:
        st.success(f"Verified mood: {d['decryptedValue']}/10")
    elif state.decrypted_value is not None:
        st.success(f"Decrypted mood: {state.decrypted_value}/10")
    else:
        st.info(f"Public mood (unverified): {d['mood']}/10")
        label = "Decrypting…" if state.decrypting else "Decrypt and verify"
        if st.button(label, key="decrypt_btn", disabled=state.decrypting):
            with st.spinner("Decrypting and submitting verification…"):
                actions.decrypt_data(state, d["businessId"], sdk)
            st.rerun()


def render(state, sdk):
    st.markdown("### My encrypted diary 🔐")
    _render_stats(state.stats)
    chart = diary.mood_by_day(state.diaries)
    if not chart.empty:
        st.bar_chart(chart, y="mood", x_label="Day", y_label="Mood")
    _render_fhe_info()

    st.markdown("### Diary entries")
    search_col, refresh_col = st.columns([3, 1])
    with search_col:
        state.search_term = st.text_input(
            "Search", value=state.search_term, placeholder="Search diaries...", label_visibility="collapsed"
        )
    with refresh_col:
        label = "Refreshing..." if state.is_refreshing else "Refresh"
        if st.button(label, key="refresh_btn", disabled=state.is_refreshing):
            with st.spinner("Loading diaries…"):
                diary.load_data(state)
            st.rerun()

    rows = state.filtered_diaries()
    if not rows:
        st.caption("No diary entries yet.")
        if st.button("Write your first entry", key="first_entry"):
            state.open_create_form()
            st.rerun()
    for d in rows:
        _render_row(state, d)

    if state.selected is not None:
        st.markdown("---")
        _render_detail(state, sdk)
