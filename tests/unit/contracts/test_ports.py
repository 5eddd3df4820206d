# tests/unit/contracts/test_ports.py
"""Tests for the port type algebra and compatibility checker."""

import pytest

from pipewright.contracts.enums import PrimitiveName
from pipewright.contracts.ports import (
    ContractPort,
    ListPort,
    MapPort,
    Ports,
    PrimitivePort,
    describe_port_type,
    is_compatible,
    parse_port_type,
    port_type_to_dict,
    runtime_input_type_to_port_type,
)


class TestAnyCompatibility:
    """any is compatible with everything, in both directions."""

    @pytest.mark.parametrize(
        "other",
        [
            Ports.text(),
            Ports.secret(),
            Ports.file(),
            Ports.list_of(Ports.number()),
            Ports.map_of(Ports.json()),
            Ports.contract("github"),
        ],
    )
    def test_any_both_directions(self, other) -> None:
        assert is_compatible(Ports.any(), other)
        assert is_compatible(other, Ports.any())

    def test_any_inside_list(self) -> None:
        """any is honoured at any nesting depth."""
        assert is_compatible(Ports.list_of(Ports.any()), Ports.list_of(Ports.contract("x")))


class TestPrimitiveCompatibility:
    def test_equal_names_compatible(self) -> None:
        assert is_compatible(Ports.file(), Ports.file())
        assert is_compatible(Ports.secret(), Ports.secret())

    def test_different_names_without_coercion(self) -> None:
        assert not is_compatible(Ports.json(), Ports.file())
        assert not is_compatible(Ports.secret(), Ports.text())

    def test_coercion_is_one_way(self) -> None:
        """number -> text is allowed by text's coercion set; text -> number only via number's."""
        text_only_from_number = Ports.text(coerce_from=["number"])
        strict_number = Ports.number(coerce_from=[])

        assert is_compatible(Ports.number(), text_only_from_number)
        assert not is_compatible(Ports.text(), strict_number)

    def test_compatibility_is_asymmetric(self) -> None:
        """A target's coercion set does not make the reverse direction valid."""
        number = Ports.number(coerce_from=[])
        text = Ports.text()  # coerces from number and boolean

        assert is_compatible(number, text)
        assert not is_compatible(text, number)

    def test_default_coercions(self) -> None:
        assert Ports.text().coerce_from == frozenset({PrimitiveName.NUMBER, PrimitiveName.BOOLEAN})
        assert Ports.number().coerce_from == frozenset({PrimitiveName.TEXT})
        assert Ports.boolean().coerce_from == frozenset({PrimitiveName.TEXT})
        assert Ports.json().coerce_from == frozenset()

    def test_secret_cannot_be_coerced(self) -> None:
        """Secrets and files never implicitly become another primitive."""
        with pytest.raises(ValueError, match="cannot declare coercion"):
            Ports.text(coerce_from=["secret"])
        with pytest.raises(ValueError, match="cannot declare coercion"):
            PrimitivePort(PrimitiveName.JSON, frozenset({PrimitiveName.FILE}))


class TestStructuralCompatibility:
    def test_contract_requires_equal_names(self) -> None:
        assert is_compatible(Ports.contract("github"), Ports.contract("github"))
        assert not is_compatible(Ports.contract("github"), Ports.contract("gitlab"))

    def test_list_recurses_on_element(self) -> None:
        assert is_compatible(Ports.list_of(Ports.number()), Ports.list_of(Ports.text()))
        assert not is_compatible(Ports.list_of(Ports.text()), Ports.list_of(Ports.number(coerce_from=[])))

    def test_bare_primitive_lists_incompatible(self) -> None:
        """Without a coercion set, list<text> never feeds list<number>."""
        text_list = ListPort(PrimitivePort(PrimitiveName.TEXT))
        number_list = ListPort(PrimitivePort(PrimitiveName.NUMBER))

        assert not is_compatible(text_list, number_list)
        assert not is_compatible(number_list, text_list)

    def test_parsed_lists_carry_default_coercions(self) -> None:
        assert is_compatible(parse_port_type("list<text>"), parse_port_type("list<number>"))

    def test_map_recurses_on_value(self) -> None:
        assert is_compatible(Ports.map_of(Ports.text()), Ports.map_of(Ports.text()))
        assert not is_compatible(Ports.map_of(Ports.file()), Ports.map_of(Ports.text()))

    def test_nested_structures(self) -> None:
        source = Ports.map_of(Ports.list_of(Ports.contract("finding")))
        assert is_compatible(source, Ports.map_of(Ports.list_of(Ports.contract("finding"))))
        assert not is_compatible(source, Ports.map_of(Ports.list_of(Ports.contract("asset"))))

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            (Ports.list_of(Ports.text()), Ports.text()),
            (Ports.text(), Ports.list_of(Ports.text())),
            (Ports.map_of(Ports.text()), Ports.list_of(Ports.text())),
            (Ports.contract("x"), Ports.json()),
        ],
    )
    def test_mixed_kinds_incompatible(self, source, target) -> None:
        assert not is_compatible(source, target)


class TestDescribeAndParse:
    @pytest.mark.parametrize(
        ("port_type", "text"),
        [
            (Ports.text(), "text"),
            (Ports.list_of(Ports.text()), "list<text>"),
            (Ports.map_of(Ports.number()), "map<number>"),
            (Ports.contract("github"), "contract:github"),
            (Ports.list_of(Ports.map_of(Ports.any())), "list<map<any>>"),
        ],
    )
    def test_describe(self, port_type, text) -> None:
        assert describe_port_type(port_type) == text

    def test_parse_textual_form_uses_default_coercions(self) -> None:
        assert parse_port_type("number") == Ports.number()
        assert parse_port_type(" list<text> ") == ListPort(Ports.text())
        assert parse_port_type("map<contract:github>") == MapPort(ContractPort("github"))

    def test_parse_mapping_form(self) -> None:
        parsed = parse_port_type({"kind": "primitive", "name": "text", "coercion": {"from": ["number"]}})
        assert parsed == Ports.text(coerce_from=["number"])

        nested = parse_port_type({"kind": "list", "element": {"kind": "contract", "name": "finding"}})
        assert nested == ListPort(ContractPort("finding"))

    def test_mapping_round_trip_keeps_credential_flag(self) -> None:
        port_type = Ports.map_of(Ports.contract("aws", credential=True))
        assert parse_port_type(port_type_to_dict(port_type)) == port_type

    def test_parse_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="Unknown port type 'widget'"):
            parse_port_type("widget")

    def test_parse_mapping_missing_key(self) -> None:
        with pytest.raises(ValueError, match="missing"):
            parse_port_type({"kind": "list"})


class TestRuntimeInputTypes:
    @pytest.mark.parametrize(
        ("runtime_type", "expected"),
        [
            ("text", "text"),
            ("string", "text"),
            ("number", "number"),
            ("file", "file"),
            ("json", "json"),
            ("array", "list<text>"),
            ("mystery", "text"),
        ],
    )
    def test_mapping(self, runtime_type, expected) -> None:
        assert describe_port_type(runtime_input_type_to_port_type(runtime_type)) == expected
