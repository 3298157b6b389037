# dashboard.py
import requests
import streamlit as st

from presse_leads.config import get_settings
from presse_leads.emails import SequenceError, SequenceRequest, send_sequence
from presse_leads.log import setup_logging
from presse_leads.opportunities import InvalidTransition, OpportunityBoard, load_opportunities
from presse_leads.report import dashboard_stats, opportunities_frame
from presse_leads import rewrite
from presse_leads.types import EmailDraft, OpportunityStatus, WeeklyOpportunity


settings = get_settings()
setup_logging(settings.log_level)

# ----------------------------
# Page config (ONLY ONCE in multipage app)
# ----------------------------
st.set_page_config(
    page_title="Union Presse — Opportunités",
    layout="wide",
    initial_sidebar_state="collapsed",
)

CSS = """
<style>
#MainMenu {visibility: hidden;}
footer {visibility: hidden;}

.up-card {
  border-radius: 16px;
  border: 1px solid rgba(140,160,190,.25);
  background: rgba(255,255,255,.75);
  padding: 14px;
}
.up-badge {
  display: inline-block;
  padding: 4px 10px;
  border-radius: 999px;
  font-size: 12px;
  font-weight: 650;
}
.up-high { background: rgba(110,220,160,.35); }
.up-mid { background: rgba(255,210,110,.35); }
.up-low { background: rgba(200,200,210,.35); }
.up-status { font-size: 12px; text-transform: uppercase; letter-spacing: .1em; opacity: .7; }
</style>
"""
st.markdown(CSS, unsafe_allow_html=True)


# ----------------------------
# Helpers
# ----------------------------
def _score_badge(score: int) -> str:
    if score >= 8:
        return "up-high"
    if score >= 6:
        return "up-mid"
    return "up-low"


def _board() -> OpportunityBoard:
    if "board" not in st.session_state:
        st.session_state["board"] = OpportunityBoard()
    return st.session_state["board"]


def _refresh():
    with st.spinner("Récupération des opportunités…"):
        _board().load(load_opportunities(settings))
    st.session_state["loaded"] = True


def _register_tracking(opp_id: str, tracking_id: str, contact_email: str):
    # opens are counted by the API process, so the send is recorded there too
    try:
        r = requests.post(
            f"{settings.app_url}/api/track",
            json={"tracking_id": tracking_id, "opportunity_id": opp_id, "contact_email": contact_email},
            timeout=5,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        st.warning(f"Envoi non enregistré sur le serveur de tracking ({settings.app_url}) : {e}")


def _send(opp: WeeklyOpportunity, subject: str, body: str):
    contact = opp.contact or {}
    req = SequenceRequest(
        opportunity_id=opp.id,
        contact_email=contact.get("email", ""),
        contact_first_name=contact.get("first_name"),
        contact_last_name=contact.get("last_name"),
        company=opp.article.publisher,
        email_subject=subject,
        email_body=body,
        article_title=opp.article.title,
        article_url=opp.article.url,
    )
    try:
        _board().check_transition(opp.id, OpportunityStatus.SENT)
        _board().update_email(opp.id, subject, body)
        result = send_sequence(req, settings=settings)
        _board().mark_sent(opp.id)
    except (SequenceError, InvalidTransition) as e:
        st.error(f"Envoi impossible : {e}")
        return

    st.session_state.setdefault("sent_tracking", {})[opp.id] = result["tracking_id"]
    _register_tracking(opp.id, result["tracking_id"], req.contact_email)
    if result.get("n8n_triggered"):
        st.success("Séquence déclenchée ✅")
    else:
        st.info("Webhook n8n non configuré : séquence préparée, à envoyer manuellement.")
        with st.expander("Séquence préparée", expanded=False):
            st.json(result.get("prepared_data", {}))


def _render_contact(contact: dict | None):
    if not contact:
        st.caption("Aucun contact trouvé pour cet éditeur.")
        return
    name = " ".join(x for x in [contact.get("first_name"), contact.get("last_name")] if x) or contact.get("email")
    st.markdown(f"**{name}** — {contact.get('job_title') or 'Poste inconnu'}")
    st.caption(contact.get("email", ""))
    if contact.get("linkedin_url"):
        st.markdown(f"[LinkedIn]({contact['linkedin_url']})")
    if contact.get("relevance_reason"):
        st.write(contact["relevance_reason"])
    if contact.get("relevance_score") is not None:
        label = "Recommandé" if contact.get("is_recommended") else "À vérifier"
        size = "grand groupe" if contact.get("is_large_company") else "petite structure"
        st.caption(f"Pertinence {contact['relevance_score']}/100 · {label} · {size}")


def _render_card(opp: WeeklyOpportunity):
    st.markdown('<div class="up-card">', unsafe_allow_html=True)
    left, right = st.columns([3, 2])

    with left:
        badge = _score_badge(opp.opportunity.score)
        st.markdown(
            f'<span class="up-badge {badge}">Score : {opp.opportunity.score}/10</span> '
            f'<span class="up-status">{opp.opportunity.type} · {opp.status.value}</span>',
            unsafe_allow_html=True,
        )
        st.markdown(f"### [{opp.article.title}]({opp.article.url})")
        st.caption(opp.article.publisher)
        if opp.article.summary:
            st.write(opp.article.summary)
        st.info(opp.opportunity.reasoning)

    with right:
        st.markdown("#### Contact")
        _render_contact(opp.contact)

    draft = opp.email or EmailDraft(subject="", body="")
    editable = opp.status == OpportunityStatus.PENDING
    with st.expander("Email suggéré", expanded=editable):
        subject = st.text_input("Objet", value=draft.subject, key=f"subject_{opp.id}", disabled=not editable)
        body = st.text_area("Message", value=draft.body, height=260, key=f"body_{opp.id}", disabled=not editable)

        if editable:
            b1, b2, b3 = st.columns(3)
            with b1:
                can_send = bool((opp.contact or {}).get("email"))
                if st.button("Envoyer", type="primary", use_container_width=True, key=f"send_{opp.id}", disabled=not can_send):
                    _send(opp, subject, body)
                    st.rerun()
            with b2:
                if st.button("Ignorer", use_container_width=True, key=f"ignore_{opp.id}"):
                    _board().mark_ignored(opp.id)
                    st.rerun()
            with b3:
                if rewrite.is_available(settings) and st.button(
                    "Reformuler (IA)", use_container_width=True, key=f"rewrite_{opp.id}"
                ):
                    with st.spinner("Reformulation…"):
                        new = rewrite.rewrite_email(EmailDraft(subject=subject, body=body), settings=settings)
                    _board().update_email(opp.id, new.subject, new.body)
                    st.session_state.pop(f"subject_{opp.id}", None)
                    st.session_state.pop(f"body_{opp.id}", None)
                    st.rerun()

    st.markdown("</div>", unsafe_allow_html=True)
    st.write("")


# ----------------------------
# Page
# ----------------------------
if not st.session_state.get("loaded"):
    _refresh()

top_l, top_r = st.columns([5, 1], vertical_alignment="center")
with top_l:
    st.title("Opportunités de la semaine")
    st.caption("Mode démo" if settings.demo_mode else f"Source : {settings.union_presse_url}")
with top_r:
    if st.button("Actualiser", type="primary", use_container_width=True):
        _refresh()
        st.rerun()

board = _board()
stats = dashboard_stats(board.items())
m1, m2, m3, m4 = st.columns(4)
m1.metric("Opportunités", stats["total"])
m2.metric("En attente", stats["pending"])
m3.metric("Envoyées", stats["sent"])
m4.metric("Score moyen", stats["avg_score"])

view = st.radio(
    "Afficher",
    options=["pending", "sent", "ignored", "all"],
    format_func=lambda x: {"pending": "En attente", "sent": "Envoyées", "ignored": "Ignorées", "all": "Toutes"}[x],
    horizontal=True,
)
status = None if view == "all" else OpportunityStatus(view)
items = board.items(status)

if not items:
    st.info("Aucune opportunité dans cette vue.")
for opp in items:
    _render_card(opp)

with st.expander("Vue tableau", expanded=False):
    st.dataframe(opportunities_frame(board.items()), use_container_width=True)
