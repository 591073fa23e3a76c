from streamlit.testing.v1 import AppTest


def click(at, label):
    next(b for b in at.button if b.label == label).click()
    return at.run()


def test_failed_compile_keeps_previous_nfa():
    at = AppTest.from_file("../app.py").run()
    nfa = at.session_state.nfa
    simulation = at.session_state.simulation
    assert nfa is not None

    at.text_input[0].input("(a|")
    click(at, "Convert to NFA")

    assert at.session_state.nfa is nfa
    assert at.session_state.simulation is simulation
    assert any("Unmatched opening parenthesis" in e.value for e in at.error)


def test_stepping_default_string_is_accepted():
    at = AppTest.from_file("../app.py").run()
    for _ in "abd":
        click(at, "Step ▶")

    assert at.session_state.simulation.index == 3
    assert [s.value for s in at.success] == ["✅ Accepted"]
