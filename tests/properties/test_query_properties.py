"""Property-based tests for JSON protocol value encoding and URL building."""

from __future__ import annotations

import re
from urllib.parse import unquote

from hypothesis import given
from hypothesis import strategies as st

from fusion.models.constants import TRUNCATION_MARKER
from fusion.transport.query import build_url, encode_value

BASE = "http://glpi.test/plugins/fusioninventory/"

_ENCODED = re.compile(r"^(?:[A-Za-z0-9_.~-]|%[0-9A-F]{2})*$")

st_text = st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=2500)
st_key = st.text(alphabet="abcdefghijklmnopqrstuvwxyz_", min_size=1, max_size=12).filter(
    lambda k: k != "action"
)
st_scalar = st.one_of(
    st.none(),
    st.integers(),
    st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=60),
)


@given(value=st_text, max_length=st.integers(min_value=9, max_value=2000))
def test_encoded_length_bounded(value: str, max_length: int) -> None:
    assert len(encode_value(value, max_length=max_length)) <= max_length


@given(value=st_text)
def test_encoded_alphabet(value: str) -> None:
    assert _ENCODED.match(encode_value(value))


@given(value=st_text, max_length=st.integers(min_value=9, max_value=2000))
def test_truncation_keeps_tail(value: str, max_length: int) -> None:
    decoded = unquote(encode_value(value, max_length=max_length))
    if decoded == value:
        return
    assert decoded.startswith(TRUNCATION_MARKER)
    assert value.endswith(decoded[len(TRUNCATION_MARKER) :])


@given(value=st.text(alphabet=st.characters(exclude_categories=("Cs",)), max_size=120))
def test_short_values_lossless(value: str) -> None:
    assert unquote(encode_value(value)) == value


@given(
    action=st_text,
    parameters=st.dictionaries(
        st_key,
        st.one_of(
            st_scalar,
            st.lists(st_scalar, max_size=4),
            st.dictionaries(st_key, st_scalar, max_size=4),
        ),
        max_size=6,
    ),
)
def test_action_leads_once(action: str, parameters: dict) -> None:
    url = build_url(BASE, {**parameters, "action": action})

    assert url.startswith(f"{BASE}?action={encode_value(action)}")
    query = url[len(BASE) + 1 :]
    assert [part for part in query.split("&") if part.startswith("action=")] == [
        f"action={encode_value(action)}"
    ]


def _expected_pairs(parameters: dict) -> list[tuple[str, str]]:
    pairs = []
    for key, value in parameters.items():
        if isinstance(value, list):
            pairs.extend((f"{key}[]", str(item) if item else "") for item in value)
        elif isinstance(value, dict):
            pairs.extend(
                (f"{key}[{sub}]", "" if item is None else str(item)) for sub, item in value.items()
            )
        elif value is not None and str(value):
            pairs.append((key, str(value)))
    return pairs


@given(
    parameters=st.dictionaries(
        st_key,
        st.one_of(
            st_scalar,
            st.lists(st_scalar, max_size=4),
            st.dictionaries(st_key, st_scalar, max_size=4),
        ),
        max_size=6,
    ),
)
def test_query_reparses_to_parameters(parameters: dict) -> None:
    url = build_url(BASE, {"action": "getJobs", **parameters})

    fragments = url[len(BASE) + 1 :].split("&")
    pairs = [tuple(fragment.split("=", 1)) for fragment in fragments]
    decoded = [(key, unquote(value)) for key, value in pairs]

    assert decoded[0] == ("action", "getJobs")
    assert decoded[1:] == _expected_pairs(parameters)
