import logging

import streamlit as st

from config import Config
from errors import RegexError
from nfa import compile as compile_regex
from rendering import decode_pattern, encode_pattern, history_frame, nfa_to_graphviz, transitions_frame
from simulation import Simulation

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("app")


def convert(pattern):
    try:
        nfa = compile_regex(pattern)
    except RegexError as e:
        # keep whatever automaton was displayed before
        logger.warning("compile failed for %r: %s", pattern, e)
        st.session_state.error = str(e)
        return
    logger.info("compiled %r into %d states", pattern, nfa.state_count)
    st.session_state.error = None
    st.session_state.pattern = pattern
    st.session_state.nfa = nfa
    st.session_state.simulation = Simulation(nfa, st.session_state.get("test_str", Config.DEFAULT_TEST_STRING))
    st.query_params["regex"] = encode_pattern(pattern)


# ========== Streamlit App ==========

st.markdown("## 🎯 RE to NFA (Thompson's Construction)")
st.markdown("### Step through the active states of the NFA one character at a time")
with st.expander("ℹ️ Help:How to Enter Regular Expressions"):
    st.markdown("""
    ### ✅ Regular Expression Input Guide
    - Use `|` for **OR** operations
      → Example: `(a|b)` means 'a or b'
    - Use `*` for zero or more, `+` for one or more, `?` for zero or one
      → Example: `ab+` means 'a' followed by at least one 'b'
    - Use `\\` to match an operator literally, e.g. `\\*`
    - Use `\\e` for the empty string (epsilon)
    - An empty pattern matches only the empty string

    ### 🔍 Sample Regular Expressions
    1. **a(b|c)*d** → 'a', then any mix of b and c, then 'd'
    2. **(0|1)+\\e?** → One or more binary digits
    """)

if "nfa" not in st.session_state:
    st.session_state.error = None
    st.session_state.nfa = None
    st.session_state.simulation = None
    initial = st.query_params.get("regex")
    convert(decode_pattern(initial) if initial is not None else Config.DEFAULT_PATTERN)

regex_input = st.text_input(
    "Enter Regular Expression:",
    value=st.session_state.get("pattern", Config.DEFAULT_PATTERN),
    max_chars=Config.MAX_PATTERN_LENGTH,
)

if st.button("Convert to NFA"):
    convert(regex_input)

if st.session_state.error:
    st.error(f"Error: {st.session_state.error}")

if st.session_state.nfa is not None:
    nfa = st.session_state.nfa
    simulation = st.session_state.simulation

    st.caption(f"{nfa.state_count} states · {nfa.transition_count} transitions · alphabet {{{', '.join(nfa.alphabet)}}}")

    st.subheader("🎯 Test String on NFA")
    test_str = st.text_input("Enter string to test:", key="test_str", value=Config.DEFAULT_TEST_STRING)
    if test_str != simulation.text:
        simulation.set_text(test_str)

    reset_col, back_col, forward_col, end_col = st.columns(4)
    if reset_col.button("⏮ Reset"):
        simulation.reset()
    if back_col.button("◀ Back"):
        simulation.step_backward()
    if forward_col.button("Step ▶"):
        simulation.step_forward()
    if end_col.button("Run ⏭"):
        simulation.run_to_end()

    consumed = simulation.text[:simulation.index]
    remaining = simulation.text[simulation.index:]
    st.markdown(f"Step **{simulation.index}/{len(simulation.text)}** · consumed `{consumed or Config.EPSILON_SYMBOL}` · remaining `{remaining or Config.EPSILON_SYMBOL}`")

    accepted = simulation.is_accepted()
    if simulation.is_at_end and accepted:
        st.success("✅ Accepted")
    elif simulation.is_at_end:
        st.error("❌ Rejected")
    elif simulation.is_stuck:
        st.error("❌ Rejected (no active states left)")

    st.subheader("📘 NFA Visualization")
    st.graphviz_chart(nfa_to_graphviz(
        nfa,
        active_ids=simulation.active_state_ids(),
        fired=simulation.fired_transitions(),
        accepted=accepted,
    ).source)

    with st.expander("Simulation History"):
        st.dataframe(history_frame(simulation))

    with st.expander("Transition Table"):
        st.dataframe(transitions_frame(nfa), hide_index=True)
