import json

from vulnscan.model import Config, ScanLevel
from vulnscan.sarif import (
    ArtifactLocation,
    CodeFlow,
    Description,
    Driver,
    Location,
    Log,
    PhysicalLocation,
    Region,
    Result,
    Rule,
    RuleTags,
    Run,
    Stack,
    ThreadFlow,
    ThreadFlowLocation,
    Tool,
)


def test_empty_log_omits_everything():
    assert Log().to_dict() == {}


def test_driver_fields_use_sarif_names():
    log = Log(
        version="2.1.0",
        runs=[Run(tool=Tool(driver=Driver(name="govulncheck", version="v1.0.0")))],
    )
    data = log.to_dict()
    assert data["version"] == "2.1.0"
    assert data["runs"][0]["tool"]["driver"] == {
        "name": "govulncheck",
        "semanticVersion": "v1.0.0",
        "properties": {},
    }


def test_schema_key():
    data = Log(schema="sarif-2.1.0.json").to_dict()
    assert data == {"$schema": "sarif-2.1.0.json"}


def test_config_properties():
    driver = Driver(properties=Config(go_version="go1.21", scan_level=ScanLevel.SYMBOL))
    data = Log(runs=[Run(tool=Tool(driver=driver))]).to_dict()
    assert data["runs"][0]["tool"]["driver"]["properties"] == {
        "go_version": "go1.21",
        "scan_level": "symbol",
    }


def test_region_omits_zero_values():
    location = Location(
        physical_location=PhysicalLocation(
            artifact_location=ArtifactLocation(uri="main.go", uri_base_id="%SRCROOT%"),
            region=Region(start_line=12, start_column=3),
        )
    )
    result = Result(rule_id="GO-1999-0001", level="error", locations=[location])
    data = Log(runs=[Run(results=[result])]).to_dict()
    encoded = data["runs"][0]["results"][0]
    assert encoded["ruleId"] == "GO-1999-0001"
    physical = encoded["locations"][0]["physicalLocation"]
    assert physical["artifactLocation"] == {"uri": "main.go", "uriBaseId": "%SRCROOT%"}
    assert physical["region"] == {"startLine": 12, "startColumn": 3}


def test_uri_base_ids_mapping():
    run = Run(uri_base_ids={"%SRCROOT%": ArtifactLocation(uri="file:///src/")})
    data = Log(runs=[run]).to_dict()
    assert data["runs"][0]["originalUriBaseIds"] == {"%SRCROOT%": {"uri": "file:///src/"}}


def test_rule_fields():
    rule = Rule(
        id="GO-1999-0001",
        short_description=Description(text="short"),
        help_uri="help",
        properties=RuleTags(tags=["CVE-1999-0001"]),
    )
    data = Log(runs=[Run(tool=Tool(driver=Driver(rules=[rule])))]).to_dict()
    encoded = data["runs"][0]["tool"]["driver"]["rules"][0]
    assert encoded["shortDescription"] == {"text": "short"}
    assert encoded["helpUri"] == "help"
    assert encoded["properties"] == {"tags": ["CVE-1999-0001"]}
    assert encoded["fullDescription"] == {}


def test_flows_and_stacks_are_json_round_trippable():
    step = ThreadFlowLocation(module="bad.com", location=Location(message=Description(text="F")))
    result = Result(
        rule_id="GO-1999-0001",
        code_flows=[CodeFlow(thread_flows=[ThreadFlow(locations=[step])])],
        stacks=[Stack(message=Description(text="stack"))],
    )
    data = Log(version="2.1.0", runs=[Run(results=[result])]).to_dict()
    assert json.loads(json.dumps(data)) == data
    encoded = data["runs"][0]["results"][0]
    assert encoded["codeFlows"][0]["threadFlows"][0]["locations"][0]["module"] == "bad.com"
    assert encoded["stacks"][0]["message"] == {"text": "stack"}