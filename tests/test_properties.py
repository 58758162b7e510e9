import plistlib
import string

from hypothesis import given
from hypothesis import strategies as st

from launchctlutil.builder import ConfigurationBuilder
from launchctlutil.triggers import TimeTriggers

LABELS = st.text(alphabet=string.ascii_letters + string.digits + ".-_", min_size=1, max_size=40)
# plist strings cannot carry most control characters
VALUES = st.text(alphabet=st.characters(blacklist_categories=("Cs", "Cc", "Cn")), max_size=30)


@given(st.integers(0, 59), st.integers(0, 23))
def test_cron_expansion(minute: int, hour: int) -> None:
    expr = f"{minute} {hour} * * *"
    t = TimeTriggers()
    t.add_cron(expr)
    assert {"Minute": minute, "Hour": hour} in t.calendar_entries


@given(LABELS, st.lists(VALUES, max_size=5), st.dictionaries(LABELS, VALUES, max_size=5))
def test_rendered_document_parses_back(label: str, arguments: list[str], env: dict[str, str]) -> None:
    builder = ConfigurationBuilder().set_label(label).set_command("/bin/echo")
    for arg in arguments:
        builder.add_argument(arg)
    for name, value in env.items():
        builder.add_environment_variable(name, value)

    plist = plistlib.loads(builder.build().contents.encode("utf-8"))
    assert plist["Label"] == label
    assert plist["ProgramArguments"] == ["/bin/echo", *arguments]
    assert plist.get("EnvironmentVariables", {}) == env
