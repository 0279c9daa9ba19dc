import pytest

from schemata.conf import RegistrySettings
from schemata.nodes import integer, literal, number, obj, ref, string
from schemata.registry import (
    DuplicateDetector,
    GeneratedSchemaPredicate,
    PrefixFamilyPredicate,
    ResponseEnvelopePredicate,
)


@pytest.fixture
def detector() -> DuplicateDetector:
    return DuplicateDetector.from_settings(RegistrySettings())


def test_same_shape_different_ids_is_duplicate(detector):
    c1 = obj({"n": number()}, id="C1")
    c2 = obj({"n": number()}, id="C2")
    assert detector.is_duplicate(c1, c2)
    assert detector.is_duplicate(c2, c1)


def test_same_object_is_not_its_own_duplicate(detector):
    c1 = obj({"n": number()}, id="C1")
    assert not detector.is_duplicate(c1, c1)
    assert detector.find_duplicates(c1, [("C1", c1)]) == ()


@pytest.mark.parametrize(
    "a, b",
    [
        (obj({"n": number()}, id="A"), obj({"n": integer()}, id="B")),
        (obj({"n": number()}, id="A"), obj({"n": number()}, id="B")),
        (obj({"r": ref("X")}, id="A"), obj({"r": ref("Y")}, id="B")),
        (obj({"s": string()}, id="OutputA"), obj({"s": string()}, id="QueryB")),
    ],
)
def test_verdict_is_symmetric_and_ignores_ids(detector, a, b):
    verdict = detector.is_duplicate(a, b)
    assert verdict == detector.is_duplicate(b, a)

    renamed = obj(dict(a.properties), id="SomethingElse")
    assert detector.is_duplicate(renamed, b) == verdict


def test_response_envelopes_are_exempt(detector):
    ok = obj({"status": literal(200), "data": ref("User")}, id="UserResponse")
    ok2 = obj({"status": literal(200), "data": ref("User")}, id="OtherResponse")
    assert not detector.is_duplicate(ok, ok2)
    assert detector.find_duplicates(ok, [("OtherResponse", ok2)]) == ()


def test_envelope_predicate_requires_literal_status():
    predicate = ResponseEnvelopePredicate()
    assert predicate(obj({"status": literal(200), "data": string()}))
    assert predicate(obj({"status": string(enum=["ok", "error"]), "data": string()}))
    assert not predicate(obj({"status": string(), "data": string()}))
    assert not predicate(obj({"status": literal(200), "data": string(), "extra": string()}))


def test_envelope_fields_are_configurable():
    detector = DuplicateDetector.from_settings(
        RegistrySettings(ENVELOPE_STATUS_FIELD="code", ENVELOPE_PAYLOAD_FIELD="payload")
    )
    a = obj({"code": literal(1), "payload": string()}, id="A")
    b = obj({"code": literal(1), "payload": string()}, id="B")
    assert not detector.is_duplicate(a, b)


def _generated(name):
    return obj(
        {"id": string(), "createdAt": string(format="date-time"), "name": string()},
        id=name,
    )


def test_generated_schemas_are_exempt_only_from_each_other(detector):
    user = _generated("OutputUserSchema")
    team = _generated("OutputTeamSchema")
    handwritten = _generated("UserView")

    assert not detector.is_duplicate(user, team)
    assert detector.is_duplicate(user, handwritten)
    assert detector.is_duplicate(handwritten, user)


def test_generated_predicate_checks_name_and_fields():
    predicate = GeneratedSchemaPredicate()
    assert predicate(_generated("InputUserSchema"))
    assert not predicate(_generated("InputUser"))
    assert not predicate(obj({"id": string()}, id="OutputUserSchema"))


def test_prefix_families_are_opt_in(detector):
    query = obj({"q": string()}, id="QueryUsers")
    output = obj({"q": string()}, id="OutputUsers")
    assert detector.is_duplicate(query, output)

    opted_in = DuplicateDetector.from_settings(
        RegistrySettings(DISTINCT_PREFIXES=("Query", "Input", "Output"))
    )
    assert not opted_in.is_duplicate(query, output)
    assert not opted_in.is_duplicate(output, query)
    assert opted_in.is_duplicate(query, obj({"q": string()}, id="QueryPeople"))


def test_prefix_family_lookup():
    predicate = PrefixFamilyPredicate()
    assert predicate.family("QueryUser") == "Query"
    assert predicate.family("User") is None
    assert predicate.family(None) is None


def test_find_duplicates_returns_candidate_ids(detector):
    new = obj({"n": number()}, id="C2")
    candidates = [
        ("C1", obj({"n": number()}, id="C1")),
        ("D", obj({"n": string()}, id="D")),
        ("E", obj({"n": number()}, id="E")),
    ]
    assert detector.find_duplicates(new, candidates) == ("C1", "E")
