from veribridge.conflicts import analyze_address_issues, detect_location_conflict
from veribridge.models import AddressComponents, IssueType, Severity


def _types(issues):
    return [i.type for i in issues]


def test_area_in_other_sub_county_is_a_conflict():
    issues = analyze_address_issues(AddressComponents(area="makina", state="Westlands", postal_code="00504"))
    assert _types(issues) == [IssueType.CONFLICT]
    issue = issues[0]
    assert issue.severity == Severity.ERROR
    assert "Kibra" in issue.message and "Westlands" in issue.message
    assert '"00504"' in issue.fix


def test_matching_sub_county_is_case_insensitive():
    issues = analyze_address_issues(AddressComponents(area=" Makina ", state="kibra", postal_code="00504"))
    assert issues == []


def test_religious_building_and_vague_terms():
    issues = analyze_address_issues(AddressComponents(building="St. Mary's Cathedral"))
    assert _types(issues) == [IssueType.FORBIDDEN_KEYWORD]
    assert issues[0].severity == Severity.ERROR

    issues = analyze_address_issues(AddressComponents(building="Plot 7", area="Westside estate"))
    assert _types(issues) == [IssueType.VAGUE_TERM]
    assert issues[0].severity == Severity.WARNING


def test_redundancy_uses_substring_containment():
    issues = analyze_address_issues(AddressComponents(city="Nairobi", state="Nairobi County"))
    assert _types(issues) == [IssueType.REDUNDANCY]
    assert 'Remove "Nairobi County"' in issues[0].fix


def test_wrong_postal_code():
    issues = analyze_address_issues(AddressComponents(area="Kibera", state="Kibra", postal_code="00100"))
    assert _types(issues) == [IssueType.WRONG_POSTAL_CODE]
    assert "Should be 00504" in issues[0].message

    # missing postal code for a known area is also flagged
    issues = analyze_address_issues(AddressComponents(area="cbd"))
    assert _types(issues) == [IssueType.WRONG_POSTAL_CODE]


def test_issues_come_back_in_check_order():
    comps = AddressComponents(building="Church opposite market", area="Makina", city="Kibra",
                              state="Westlands Kibra", postal_code="00100")
    assert _types(analyze_address_issues(comps)) == [
        IssueType.CONFLICT,
        IssueType.FORBIDDEN_KEYWORD,
        IssueType.VAGUE_TERM,
        IssueType.REDUNDANCY,
        IssueType.WRONG_POSTAL_CODE,
    ]


def test_unknown_area_has_no_location_issues():
    assert analyze_address_issues(AddressComponents(area="Kilimani", state="Dagoretti", postal_code="1")) == []


def test_detect_location_conflict():
    assert detect_location_conflict("", "Kibra") is None
    assert detect_location_conflict("Kilimani", "Kibra") is None

    ok = detect_location_conflict("ngara", "Starehe")
    assert ok.has_conflict is False
    assert ok.correct_postal_code == "00106"
    assert ok.suggested_roads == ("Ngara Road", "Limuru Road")

    bad = detect_location_conflict("ngara", "Kasarani")
    assert bad.has_conflict is True
    assert (bad.actual_sub_county, bad.declared_sub_county) == ("Starehe", "Kasarani")
