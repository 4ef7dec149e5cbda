"""
Tests for ADMX loading and raw reference parsing.
"""

import pytest
from pathlib import Path

from admx_export import document
from admx_export.document import (
    ApplicabilityDefinition,
    CategoryDefinition,
    Cross,
    DefinitionDocument,
    Local,
    Named,
    parse_definition_ref,
    parse_string_ref,
)
from admx_export.errors import MalformedDefinitionFile


class TestParseStringRef:
    """displayName / explainText attributes are always simple references."""

    def test_string_token(self):
        assert parse_string_ref("$(string.POL_NAME)") == Local("POL_NAME")

    def test_string_token_with_spaces(self):
        assert parse_string_ref("  $( string.A.b-c ) ") == Local("A.b-c")

    def test_colon_qualified_is_cross_file(self):
        assert parse_string_ref("en_base:SUP_WIN10_STR") == Cross("en_base", "SUP_WIN10_STR")

    def test_plain_text_is_local(self):
        assert parse_string_ref("Plain") == Local("Plain")

    def test_missing_attribute(self):
        assert parse_string_ref(None) == Local("")


class TestParseDefinitionRef:
    """parentCategory / supportedOn refs go through named definitions unless they are direct keys."""

    def test_plain_name_is_named(self):
        assert parse_definition_ref("SampleCat") == Named("SampleCat")

    def test_prefixed_name_is_cross_file(self):
        assert parse_definition_ref("windows:SUPPORTED_Win10", "sample") == Cross("windows", "SUPPORTED_Win10")

    def test_own_prefix_is_named(self):
        assert parse_definition_ref("Sample:SampleCat", "sample") == Named("SampleCat")

    def test_string_token_is_local(self):
        assert parse_definition_ref("$(string.Cat)") == Local("Cat")

    @pytest.mark.parametrize("value", [None, "", "   ", "windows:"])
    def test_empty_refs(self, value):
        assert parse_definition_ref(value, "sample") is None


class TestLoad:
    """Tests for document.load()."""

    def test_load_sample(self, sample_definitions):
        doc = document.load(sample_definitions.root / "sample.admx")

        assert doc.base_name == "sample"
        assert doc.target_prefix == "sample"
        assert doc.namespaces == {"windows": "Microsoft.Policies.Windows"}
        assert doc.categories == [CategoryDefinition("SampleCat", Local("SampleCat"))]
        assert doc.applicability == [
            ApplicabilityDefinition("Supported_Win10", Cross("en_base", "SUP_WIN10_STR")),
            ApplicabilityDefinition("Supported_Local", Local("Supported_Local")),
        ]

    def test_policies_in_document_order_without_comments(self, sample_definitions):
        doc = document.load(sample_definitions.root / "sample.admx")

        assert [p.name for p in doc.policies] == ["EnableThing", "Pol123", "Orphan"]

    def test_policy_fields(self, sample_definitions):
        doc = document.load(sample_definitions.root / "sample.admx")
        first, second, third = doc.policies

        assert first.source_file == "sample.admx"
        assert first.policy_class == "Machine"
        assert first.display_name_ref == Local("EnableThing")
        assert first.explain_text_ref == Local("EnableThing_Help")
        assert first.parent_category_ref == Named("SampleCat")
        assert first.applicability_ref == Named("Supported_Win10")
        assert first.registry_key == "Software\\Policies\\Sample"
        assert first.registry_value_name == "Enable"

        assert second.parent_category_ref == Cross("windows", "WindowsComponents")
        assert second.applicability_ref == Cross("windows", "SUPPORTED_Win10")
        assert second.registry_key == "Software\\Policies\\Sample\\Sub"
        assert second.registry_value_name == "Value123"

        assert third.applicability_ref == Named("Supported_Local")
        assert third.registry_value_name == ""

    def test_policy_without_optional_refs(self, definitions):
        path = definitions.admx("bare", """
  <policies>
    <policy name="Bare" class="Machine" displayName="$(string.Bare)" explainText="$(string.Bare_Help)" key="K" />
  </policies>
""")
        policy, = document.load(path).policies

        assert policy.parent_category_ref is None
        assert policy.applicability_ref is None

    def test_document_without_policies(self, sample_definitions):
        doc = document.load(sample_definitions.root / "windows.admx")
        assert doc.policies == []
        assert doc.find_definition("WindowsComponents") is not None

    def test_malformed_file(self, definitions):
        path = definitions.raw("broken.admx", "<policyDefinitions><policies>")

        with pytest.raises(MalformedDefinitionFile) as exc_info:
            document.load(path)
        assert exc_info.value.path == path

    def test_missing_file(self, tmp_path):
        with pytest.raises(MalformedDefinitionFile):
            document.load(tmp_path / "nope.admx")


class TestFindDefinition:

    def test_categories_before_applicability(self):
        doc = DefinitionDocument(
            Path("x.admx"),
            categories=[CategoryDefinition("Same", Local("CAT"))],
            applicability=[ApplicabilityDefinition("Same", Local("SUP"))],
        )
        assert doc.find_definition("Same").display_name_ref == Local("CAT")

    def test_unknown_name(self):
        assert DefinitionDocument(Path("x.admx")).find_definition("Nope") is None
