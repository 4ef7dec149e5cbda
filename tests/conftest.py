"""
Shared fixtures: small PolicyDefinitions trees written under tmp_path.
"""

import pytest
from pathlib import Path


ADMX_NS = "http://schemas.microsoft.com/GroupPolicy/2006/07/PolicyDefinitions"


def admx_text(body, prefix="test", namespace="Test.Policies", using=None):
    using_xml = "".join(
        f'<using prefix="{p}" namespace="{ns}" />' for p, ns in (using or {}).items()
    )
    return f"""<?xml version="1.0" encoding="utf-8"?>
<policyDefinitions xmlns="{ADMX_NS}" revision="1.0" schemaVersion="1.0">
  <policyNamespaces>
    <target prefix="{prefix}" namespace="{namespace}" />
    {using_xml}
  </policyNamespaces>
  <resources minRequiredRevision="1.0" />
{body}
</policyDefinitions>
"""


def adml_text(strings):
    entries = "\n".join(f'      <string id="{k}">{v}</string>' for k, v in strings.items())
    return f"""<?xml version="1.0" encoding="utf-8"?>
<policyDefinitionResources xmlns="{ADMX_NS}" revision="1.0" schemaVersion="1.0">
  <displayName />
  <description />
  <resources>
    <stringTable>
{entries}
    </stringTable>
  </resources>
</policyDefinitionResources>
"""


class DefinitionsDir:
    """Builder for a PolicyDefinitions directory."""

    def __init__(self, root: Path):
        self.root = root
        root.mkdir(parents=True, exist_ok=True)

    def admx(self, name, body, **kwargs) -> Path:
        path = self.root / f"{name}.admx"
        path.write_text(admx_text(body, **kwargs), encoding="utf-8")
        return path

    def adml(self, name, strings, language="en-US") -> Path:
        locale_dir = self.root / language
        locale_dir.mkdir(exist_ok=True)
        path = locale_dir / f"{name}.adml"
        path.write_text(adml_text(strings), encoding="utf-8")
        return path

    def raw(self, relative, text) -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path


@pytest.fixture
def definitions(tmp_path):
    return DefinitionsDir(tmp_path / "PolicyDefinitions")


SAMPLE_BODY = """
  <supportedOn>
    <definitions>
      <definition name="Supported_Win10" displayName="en_base:SUP_WIN10_STR" />
      <definition name="Supported_Local" displayName="$(string.Supported_Local)" />
    </definitions>
  </supportedOn>
  <categories>
    <category name="SampleCat" displayName="$(string.SampleCat)">
      <parentCategory ref="windows:WindowsComponents" />
    </category>
  </categories>
  <policies>
    <policy name="EnableThing" class="Machine" displayName="$(string.EnableThing)"
            explainText="$(string.EnableThing_Help)" key="Software\\Policies\\Sample" valueName="Enable">
      <parentCategory ref="SampleCat" />
      <supportedOn ref="Supported_Win10" />
    </policy>
    <!-- <policy name="Commented" class="User" displayName="$(string.Commented)" /> -->
    <policy name="Pol123" class="User" displayName="$(string.POL_123_NAME)"
            explainText="$(string.Pol123_Help)" key="Software/Policies/Sample/Sub" valuename="Value123">
      <parentCategory ref="windows:WindowsComponents" />
      <supportedOn ref="windows:SUPPORTED_Win10" />
    </policy>
    <policy name="Orphan" class="Both" displayName="$(string.Orphan)"
            explainText="$(string.Orphan_Help)" key="Software\\Policies\\Sample">
      <parentCategory ref="NoSuchCategory" />
      <supportedOn ref="sample:Supported_Local" />
    </policy>
  </policies>
"""

WINDOWS_BODY = """
  <supportedOn>
    <definitions>
      <definition name="SUPPORTED_Win10" displayName="$(string.SUPPORTED_Win10)" />
    </definitions>
  </supportedOn>
  <categories>
    <category name="WindowsComponents" displayName="$(string.WindowsComponents)" />
  </categories>
"""


@pytest.fixture
def sample_definitions(definitions):
    """
    sample.admx with three policies (plus a commented one), the shared
    windows/en_base localizations and the sample ADML.
    """
    definitions.admx("sample", SAMPLE_BODY, prefix="sample", namespace="Sample.Policies",
                     using={"windows": "Microsoft.Policies.Windows"})
    definitions.adml("sample", {
        "SampleCat": "Sample settings",
        "Supported_Local": "Sample platforms",
        "EnableThing": "Enable the thing",
        "EnableThing_Help": "Turns the thing on.",
        "Pol123_Help": "Help for policy 123.",
        "Orphan": "Orphan policy",
        "Orphan_Help": "Has no valid category.",
    })
    definitions.admx("windows", WINDOWS_BODY, prefix="windows", namespace="Microsoft.Policies.Windows")
    definitions.adml("windows", {
        "SUPPORTED_Win10": "At least Windows 10",
        "WindowsComponents": "Windows Components",
    })
    definitions.adml("en_base", {"SUP_WIN10_STR": "Windows 10"})
    return definitions
