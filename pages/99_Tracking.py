# pages/99_Tracking.py
# Open tracking for emails sent from the dashboard. Opens are recorded by the
# API server (python -m presse_leads.api), so this page only queries it.

import pandas as pd
import requests
import streamlit as st

from presse_leads.config import get_settings

settings = get_settings()


def _api(method: str, path: str):
    try:
        r = requests.request(method, f"{settings.app_url}{path}", timeout=5)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        st.warning(f"API injoignable ({settings.app_url}) : {e}")
        return None


st.title("Suivi des ouvertures")
st.caption(f"Serveur de tracking : {settings.app_url}")

sent = st.session_state.get("sent_tracking", {})

st.subheader("Envois de cette session")
if not sent:
    st.info("Aucun email envoyé depuis le tableau de bord dans cette session.")
else:
    rows = []
    for opp_id, tracking_id in sent.items():
        status = _api("POST", f"/api/track/{tracking_id}") or {}
        rows.append(
            {
                "opportunity_id": opp_id,
                "tracking_id": tracking_id,
                "opened": bool(status.get("opened")),
                "opened_at": status.get("opened_at", ""),
                "count": status.get("count", 0),
            }
        )
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

st.subheader("Tous les enregistrements du serveur")
records = _api("GET", "/api/track")
if records:
    st.dataframe(pd.DataFrame(records), use_container_width=True)
elif records is not None:
    st.info("Aucun enregistrement.")

if st.button("Rafraîchir", type="primary"):
    st.rerun()
