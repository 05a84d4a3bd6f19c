import pytest

from app.core.policy import (
    DEFAULT_RULES,
    CommitteeRole,
    Decision,
    DenyReason,
    PolicyRule,
    Principal,
    ResourceScope,
    Role,
    RuleKind,
    UnknownActionError,
    authorize,
    validate_actions,
)


def principal(role=Role.Student, **kwargs):
    return Principal(id="u-1", role=role, **kwargs)


def committee_member(committee_role, post=None, department=None, role=Role.Student):
    return principal(
        role=role,
        is_committee=True,
        committee_role=committee_role,
        committee_post=post,
        managed_department=department,
    )


COMMITTEE_SCOPED = [a for a, r in DEFAULT_RULES.items() if r.committee_scoped]


# ------------------------------------------------------------------
# Table-wide properties
# ------------------------------------------------------------------
@pytest.mark.parametrize("action", sorted(DEFAULT_RULES))
def test_admin_allowed_on_every_registered_action(action):
    admin = principal(Role.Admin)
    assert authorize(admin, action)
    assert authorize(admin, action, ResourceScope(department="ECE"))


@pytest.mark.parametrize("action", COMMITTEE_SCOPED)
@pytest.mark.parametrize("department", [None, "ECE", "IT/CME"])
def test_chair_allowed_on_committee_scoped_actions_for_any_scope(action, department):
    chair = committee_member(CommitteeRole.Chair, department="CIVIL/MECH")
    assert authorize(chair, action, ResourceScope(department=department))


def test_committee_scoped_actions_are_the_committee_rules():
    assert set(COMMITTEE_SCOPED) == {
        "view_department_students",
        "view_department_stats",
        "edit_department_student",
        "view_permissions",
        "respond_permission",
    }


@pytest.mark.parametrize("action", sorted(DEFAULT_RULES))
def test_plain_student_denied_with_reason_matching_rule_kind(action):
    rule = DEFAULT_RULES[action]
    decision = authorize(principal(Role.Student), action)

    assert not decision
    if rule.kind == RuleKind.Committee:
        assert decision.reason == DenyReason.InsufficientCommitteeRole
    else:
        assert decision.reason == DenyReason.InsufficientRole


def test_rule_table_is_read_only():
    with pytest.raises(TypeError):
        DEFAULT_RULES["manage_users"] = PolicyRule.role(Role.Student)


# ------------------------------------------------------------------
# Unknown actions
# ------------------------------------------------------------------
def test_unknown_action_denies_even_admin():
    decision = authorize(principal(Role.Admin), "launch_rocket")
    assert decision == Decision(False, DenyReason.UnknownAction)


def test_unknown_action_denies_chair():
    chair = committee_member(CommitteeRole.Chair)
    assert authorize(chair, "launch_rocket").reason == DenyReason.UnknownAction


def test_validate_actions_lists_every_missing_action():
    with pytest.raises(UnknownActionError) as exc:
        validate_actions(["manage_users", "zeta", "alpha"])
    assert exc.value.actions == ["alpha", "zeta"]


def test_validate_actions_accepts_known_actions():
    validate_actions(list(DEFAULT_RULES))


def test_rule_with_unknown_flag_is_rejected():
    with pytest.raises(ValueError):
        PolicyRule.role(Role.Admin, flags=("is_wizard",))


# ------------------------------------------------------------------
# Department scope
# ------------------------------------------------------------------
@pytest.mark.parametrize("committee_role", [CommitteeRole.DeptHead, CommitteeRole.DeptViceHead])
def test_dept_head_scope_flip(committee_role):
    head = committee_member(committee_role, department="ECE")

    assert authorize(head, "view_department_students", ResourceScope(department="ECE"))

    decision = authorize(head, "view_department_students", ResourceScope(department="IT/CME"))
    assert not decision
    assert decision.reason == DenyReason.OutOfScope


def test_scoped_action_without_scope_is_out_of_scope():
    head = committee_member(CommitteeRole.DeptHead, department="ECE")
    decision = authorize(head, "view_department_students")
    assert decision.reason == DenyReason.OutOfScope


def test_scoped_action_without_managed_department_is_out_of_scope():
    head = committee_member(CommitteeRole.DeptHead, department=None)
    decision = authorize(head, "view_department_students", ResourceScope(department=None))
    assert decision.reason == DenyReason.OutOfScope


def test_dept_vice_head_cannot_edit_students():
    vice = committee_member(CommitteeRole.DeptViceHead, department="ECE")
    decision = authorize(vice, "edit_department_student", ResourceScope(department="ECE"))
    assert decision.reason == DenyReason.InsufficientCommitteeRole


def test_department_stats_are_not_scoped():
    head = committee_member(CommitteeRole.DeptHead, department="ECE")
    assert authorize(head, "view_department_stats", ResourceScope(department="IT/CME"))


def test_committee_role_without_committee_flag_is_denied():
    stale = principal(committee_role=CommitteeRole.DeptHead, managed_department="ECE", is_committee=False)
    decision = authorize(stale, "view_department_students", ResourceScope(department="ECE"))
    assert decision.reason == DenyReason.InsufficientCommitteeRole


# ------------------------------------------------------------------
# Named scenarios
# ------------------------------------------------------------------
def test_scenario_representative_post_may_post_announcement():
    rep = committee_member(CommitteeRole.Representative, post="Class Representative")
    assert authorize(rep, "post_announcement")


def test_scenario_post_match_is_case_sensitive():
    rep = committee_member(CommitteeRole.Representative, post="class representative")
    assert authorize(rep, "post_announcement").reason == DenyReason.InsufficientRole


def test_scenario_executive_head_creates_but_cannot_approve_event():
    head = principal(Role.ExecutiveHead)
    assert authorize(head, "create_event")
    assert authorize(head, "approve_event").reason == DenyReason.InsufficientRole


def test_scenario_committee_chair_role_approves_events():
    assert authorize(principal(Role.CommitteeChair), "approve_event")


def test_scenario_student_cannot_create_course():
    decision = authorize(principal(Role.Student), "create_course")
    assert decision == Decision.deny(DenyReason.InsufficientRole)


def test_scenario_chair_with_chair_committee_role_approves_events():
    chair = principal(Role.CommitteeChair, is_committee=True, committee_role=CommitteeRole.Chair)
    assert authorize(chair, "approve_event") == Decision(True)


def test_scenario_dept_head_denied_outside_managed_department():
    head = committee_member(CommitteeRole.DeptHead, department="CSE")
    decision = authorize(head, "view_department_students", ResourceScope(department="EE"))
    assert decision == Decision.deny(DenyReason.OutOfScope)


def test_scenario_faculty_cannot_create_event():
    decision = authorize(principal(Role.Faculty), "create_event")
    assert not decision
    assert decision.reason == DenyReason.InsufficientRole


def test_scenario_developer_flag_edits_site_config():
    dev = principal(Role.Student, is_developer=True)
    assert authorize(dev, "edit_site_config")
    assert not authorize(principal(Role.Developer), "edit_site_config")


def test_committee_flag_admits_course_creation_and_event_updates():
    member = principal(Role.Student, is_committee=True)
    assert authorize(member, "create_course")
    assert authorize(member, "update_event")
    assert not authorize(member, "create_event")


def test_committee_flag_admits_query_viewing_but_not_responding():
    member = principal(Role.Student, is_committee=True, committee_post="Treasurer")
    assert authorize(member, "view_queries")
    assert not authorize(member, "respond_query")


def test_chair_override_does_not_reach_role_rules():
    chair = committee_member(CommitteeRole.Chair)
    assert authorize(chair, "manage_users").reason == DenyReason.InsufficientRole


def test_vice_chair_views_but_cannot_respond_to_permissions():
    vice = committee_member(CommitteeRole.ViceChair)
    assert authorize(vice, "view_permissions")
    assert authorize(vice, "respond_permission").reason == DenyReason.InsufficientCommitteeRole


def test_faculty_reviews_projects():
    assert authorize(principal(Role.Faculty), "review_project")
    assert not authorize(principal(Role.Student), "review_project")


def test_custom_rule_table():
    rules = {"open_lab": PolicyRule.role(Role.Student, Role.Faculty)}
    assert authorize(principal(Role.Student), "open_lab", rules=rules)
    assert authorize(principal(Role.Student), "manage_users", rules=rules).reason == DenyReason.UnknownAction


def test_decision_truthiness():
    assert Decision(True)
    assert not Decision.deny(DenyReason.OutOfScope)
