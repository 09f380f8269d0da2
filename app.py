import streamlit as st
import json
import pandas as pd
import matplotlib.pyplot as plt
import os
import time
import matplotlib
matplotlib.use('Agg')

from src.dsa_ref.config import DSSConfig
from src.dsa_ref.errors import DSSError
from src.dsa_ref.marshal import describe_int, parse_int, parse_signature
from src.scheme.background import run_in_background
from src.scheme.dss_scheme import DSSSession

# ── Page Config ──────────────────────────────────────────────────────────────
st.set_page_config(
    page_title="DSS Lab",
    layout="wide",
    page_icon="🔏"
)

# ── Custom CSS ────────────────────────────────────────────────────────────────
st.markdown("""
<style>
    .block-container { padding: 2rem 3rem; }
    h2 { border-bottom: 1px solid #333366; padding-bottom: 8px; }
    .section-note {
        background: #1a1f40;
        border-left: 3px solid #f39c12;
        padding: 10px 16px;
        border-radius: 6px;
        font-size: 0.85em;
        color: #d0c090;
        margin: 8px 0;
    }
    .verdict-good { background:#1a4d2e; color:#2ecc71; border-radius:6px; padding:8px 12px; }
    .verdict-bad  { background:#4d1a1a; color:#e74c3c; border-radius:6px; padding:8px 12px; }
</style>
""", unsafe_allow_html=True)

RESULTS_FILE = "results/benchmark_results.json"


def note(html):
    st.markdown(f'<div class="section-note">{html}</div>', unsafe_allow_html=True)


def verdict(ok, text):
    css = "verdict-good" if ok else "verdict-bad"
    st.markdown(f'<div class="{css}">{text}</div>', unsafe_allow_html=True)


def show_value(label, value):
    """Decimal value with its hex form and bit length; st.code adds a copy button."""
    info = describe_int(value)
    st.markdown(f"**{label}** · {info['bits']} bits")
    st.code(info["decimal"], language=None)
    st.caption(info["hex"])


def values_table(rows):
    df = pd.DataFrame([{"Value": k, "Decimal": str(v), "Hex": hex(v), "Bits": v.bit_length()}
                       for k, v in rows])
    st.dataframe(df, use_container_width=True, hide_index=True)


session = st.session_state.get("dss")

# ── Header ────────────────────────────────────────────────────────────────────
st.markdown("## 🔏 DSS Lab — Digital Signature Standard, step by step")
st.markdown("*Toy-sized parameters for teaching. Not for protecting anything real.*")
st.divider()

tab_keys, tab_sign, tab_verify, tab_edge, tab_bench = st.tabs(
    ["Key Generation", "Sign", "Verify", "Edge Cases", "Benchmarks"])

# ─────────────────────────────────────────────────────────────────────────────
# TAB 1: KEY GENERATION
# ─────────────────────────────────────────────────────────────────────────────
with tab_keys:
    st.markdown("### 🔑 Domain Parameters and Key Pair")
    q_bits = st.slider("Bit length of q", min_value=9, max_value=32, value=16)

    if st.button("Generate parameters and keys", type="primary"):
        job = run_in_background(DSSSession.generate, DSSConfig(q_bits=q_bits))
        status = st.empty()
        started = time.monotonic()
        while not job.done():
            status.caption(f"Searching for primes... {time.monotonic() - started:.1f}s")
            time.sleep(0.1)
        status.empty()
        try:
            st.session_state["dss"] = job.result()
            st.session_state.pop("last_signing", None)
        except DSSError as exc:
            st.error(f"Generation failed: {exc}")
        session = st.session_state.get("dss")

    with st.expander("Use your own parameters"):
        c1, c2, c3, c4 = st.columns(4)
        p_text = c1.text_input("p")
        q_text = c2.text_input("q")
        g_text = c3.text_input("g")
        x_text = c4.text_input("x (optional)")
        if st.button("Load parameters"):
            try:
                st.session_state["dss"] = DSSSession.from_values(
                    p_text, q_text, g_text, x_text if x_text.strip() else None)
                st.session_state.pop("last_signing", None)
            except DSSError as exc:
                st.error(f"Invalid parameters: {exc}")
            session = st.session_state.get("dss")

    if session is None:
        st.info("No keys yet. Generate parameters to begin.")
    else:
        params, kp = session.params, session.key_pair
        c1, c2, c3 = st.columns(3)
        with c1:
            show_value("Prime modulus (p)", params.p)
        with c2:
            show_value("Prime divisor (q)", params.q)
        with c3:
            show_value("Generator (g)", params.g)
        c4, c5 = st.columns(2)
        with c4:
            show_value("Private key (x)", kp.private_key)
        with c5:
            show_value("Public key (y = g^x mod p)", kp.public_key)
        note("q divides p − 1 and g = h<sup>(p−1)/q</sup> mod p ≠ 1, so g generates the "
             "subgroup of order q. Real DSA uses 2048-bit p and 224/256-bit q.")

# ─────────────────────────────────────────────────────────────────────────────
# TAB 2: SIGN
# ─────────────────────────────────────────────────────────────────────────────
with tab_sign:
    st.markdown("### ✍️ Sign a Message")
    if session is None:
        st.warning("Please generate keys first in the Key Generation tab")
    else:
        message = st.text_area("Message", key="sign_message")
        mode = st.radio("Nonce k", ["random", "fixed", "deterministic"], horizontal=True,
                        help="deterministic = RFC 6979")
        fixed_k = st.text_input("Fixed k (decimal or 0x hex)", disabled=(mode != "fixed"))

        if st.button("Sign", type="primary"):
            if not message.strip():
                st.error("Please enter a message to sign")
            else:
                try:
                    nonce = parse_int(fixed_k, "k") if mode == "fixed" else None
                    result = session.sign(message, nonce_mode=mode, nonce=nonce)
                    st.session_state["last_signing"] = (message, result)
                except DSSError as exc:
                    st.error(str(exc))

        last = st.session_state.get("last_signing")
        if last is not None:
            signed_message, result = last
            c1, c2 = st.columns(2)
            with c1:
                show_value("r", result.signature.r)
            with c2:
                show_value("s", result.signature.s)
            st.markdown("#### Intermediate values")
            st.caption(f"SHA-256: `{result.digest}`")
            values_table([
                ("H(m) mod q", result.steps.hash_int),
                ("Nonce k", result.nonce),
                ("k⁻¹ mod q", result.steps.nonce_inverse),
                ("r = (g^k mod p) mod q", result.steps.r),
                ("s = k⁻¹(H(m) + x·r) mod q", result.steps.s),
            ])
            if st.button("Send to Verify"):
                st.session_state["verify_message"] = signed_message
                st.session_state["verify_r"] = str(result.signature.r)
                st.session_state["verify_s"] = str(result.signature.s)
                st.success("Copied into the Verify tab")

# ─────────────────────────────────────────────────────────────────────────────
# TAB 3: VERIFY
# ─────────────────────────────────────────────────────────────────────────────
with tab_verify:
    st.markdown("### ✅ Verify a Signature")
    if session is None:
        st.warning("Please generate keys first in the Key Generation tab")
    else:
        v_message = st.text_area("Message", key="verify_message")
        c1, c2 = st.columns(2)
        r_text = c1.text_input("r", key="verify_r")
        s_text = c2.text_input("s", key="verify_s")

        if st.button("Verify", type="primary"):
            if not (v_message.strip() and r_text.strip() and s_text.strip()):
                st.error("Please enter message, r, and s values")
            else:
                try:
                    outcome = session.verify(v_message, parse_signature(r_text, s_text))
                except DSSError as exc:
                    st.error(f"Invalid signature values: {exc}")
                else:
                    verdict(outcome.valid, outcome.reason)
                    values_table([
                        ("w = s⁻¹ mod q", outcome.steps.w),
                        ("u1 = H(m)·w mod q", outcome.steps.u1),
                        ("u2 = r·w mod q", outcome.steps.u2),
                        ("v = (g^u1·y^u2 mod p) mod q", outcome.steps.v),
                        ("r", outcome.steps.r),
                    ])

# ─────────────────────────────────────────────────────────────────────────────
# TAB 4: EDGE CASES
# ─────────────────────────────────────────────────────────────────────────────
with tab_edge:
    st.markdown("### ⚠️ Edge Cases and Attacks")
    if session is None:
        st.warning("Please generate keys first in the Key Generation tab")
    else:
        st.markdown("#### Nonce reuse")
        note("Signing two messages with the same k gives both signatures the same r. "
             "Anyone holding both can solve for k and then for the private key x.")
        c1, c2 = st.columns(2)
        m1 = c1.text_input("Message 1", value="Hello World")
        m2 = c2.text_input("Message 2", value="Secret Message")
        reuse_k = st.text_input("Fixed k value (same for both messages)", value="12345")
        if st.button("Demonstrate k-reuse attack"):
            try:
                demo = session.demonstrate_nonce_reuse(m1, m2, reuse_k)
            except DSSError as exc:
                st.error(str(exc))
            else:
                values_table([
                    ("r (shared)", demo.first.signature.r),
                    ("s1", demo.first.signature.s),
                    ("s2", demo.second.signature.s),
                ] + ([("recovered k", demo.recovery.nonce),
                      ("recovered x", demo.recovery.private_key)] if demo.recovery.recovered else []))
                verdict(not demo.attack_succeeded,
                        "⚠️ ATTACK SUCCESSFUL — private key recovered!" if demo.attack_succeeded
                        else f"Attack failed: {demo.recovery.reason}")

        st.markdown("#### Malformed signatures")
        if st.button("Test invalid signatures"):
            cases = session.demonstrate_invalid_signatures(m1)
            df = pd.DataFrame([{
                "Case": c.description, "r": str(c.signature.r), "s": str(c.signature.s),
                "Result": "✓ Correctly rejected" if c.rejected else "⚠️ Incorrectly validated",
                "Reason": c.verification.reason,
            } for c in cases])
            st.dataframe(df, use_container_width=True, hide_index=True)

        st.markdown("#### Large message")
        if st.button("Test large message"):
            big = session.demonstrate_large_message()
            st.metric("Message length", f"{big.length:,} characters")
            verdict(big.verification.valid,
                    "✓ Verification passed" if big.verification.valid else "✗ Verification failed")

# ─────────────────────────────────────────────────────────────────────────────
# TAB 5: BENCHMARKS
# ─────────────────────────────────────────────────────────────────────────────
with tab_bench:
    st.markdown("### ⚡ Benchmarks")
    if not os.path.exists(RESULTS_FILE):
        st.info("No benchmark data found. Run `python main.py --quick` in your terminal first.")
    else:
        with open(RESULTS_FILE, "r") as f:
            data = json.load(f)
        eff = data.get("efficiency", {})
        props = data.get("properties", {})

        df_eff = pd.DataFrame([{
            "Operation": k.replace("_", " ").title(),
            "Mean (ms)": round(m.get("mean", 0), 3),
            "Std Dev (ms)": round(m.get("std", 0), 3),
            "p95 (ms)": round(m.get("p95", 0), 3),
        } for k, m in eff.items()])
        st.dataframe(df_eff, use_container_width=True, hide_index=True)

        if not df_eff.empty:
            fig, ax = plt.subplots(figsize=(10, 4), facecolor='#0e1117')
            ax.bar(df_eff["Operation"], df_eff["Mean (ms)"], yerr=df_eff["Std Dev (ms)"],
                   color='#6068dd', capsize=5, error_kw={'ecolor': 'white', 'alpha': 0.6})
            ax.set_yscale('log')
            ax.set_ylabel("Time (ms) — Log Scale", color='white')
            ax.tick_params(colors='white')
            ax.set_facecolor('#0d0f20')
            for spine in ax.spines.values():
                spine.set_edgecolor('#333366')
            plt.setp(ax.xaxis.get_majorticklabels(), rotation=15, ha='right', fontsize=8)
            fig.tight_layout()
            st.pyplot(fig)
            plt.close(fig)

        attack = props.get("nonce_reuse", {})
        primality = props.get("primality", {})
        m1c, m2c, m3c = st.columns(3)
        m1c.metric("Nonce-reuse success", f"{attack.get('success_rate', 0):.0%}",
                   f"{attack.get('trials', 0)} trials")
        m2c.metric("MR false positives", primality.get("false_positives", 0),
                   f"n < {primality.get('bound', 0):,}")
        m3c.metric("MR false negatives", primality.get("false_negatives", 0))
