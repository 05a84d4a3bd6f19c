# app/core/policy.py
"""
Authorization policy engine.

Every gated action in the API is a key in a rule table. A rule says which
principals may perform the action:

* ``role``      - the principal's flat role must be in ``roles``
* ``committee`` - the principal must be on the committee and hold one of
                  ``committee_roles``
* ``post``      - the free-text committee post must contain one of
                  ``post_substrings`` (case-sensitive)

Any rule may also list principal ``flags`` (``is_committee``, ``is_developer``
...) that admit on their own, and may be ``scoped_by_department``, in which
case an eligible principal must also manage the department of the resource.

``authorize`` never raises for a denial; it returns a ``Decision``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


class Role(str, Enum):
    Student = "student"
    Faculty = "faculty"
    Admin = "admin"
    CommitteeChair = "committee_chair"
    CommitteeViceChair = "committee_vice_chair"
    Secretary = "secretary"
    ViceSecretary = "vice_secretary"
    ExecutiveHead = "executive_head"
    Executive = "executive"
    RepresentativeHead = "representative_head"
    Representative = "representative"
    DeveloperHead = "developer_head"
    Developer = "developer"


class CommitteeRole(str, Enum):
    Chair = "chair"
    ViceChair = "vice_chair"
    Secretary = "secretary"
    ViceSecretary = "vice_secretary"
    DeptHead = "dept_head"
    DeptViceHead = "dept_vice_head"
    Representative = "representative"


class RuleKind(str, Enum):
    Role = "role"
    Committee = "committee"
    Post = "post"


class DenyReason(str, Enum):
    InsufficientRole = "insufficient_role"
    InsufficientCommitteeRole = "insufficient_committee_role"
    OutOfScope = "out_of_scope"
    UnknownAction = "unknown_action"


PRINCIPAL_FLAGS = frozenset({"is_committee", "is_executive", "is_representative", "is_developer"})


class UnknownActionError(ValueError):
    """Raised when code references actions that have no registered rule."""

    def __init__(self, actions: Iterable[str]):
        self.actions = sorted(set(actions))
        super().__init__(f"No policy rule registered for action(s): {', '.join(self.actions)}")


@dataclass(frozen=True)
class Principal:
    id: str
    role: Role
    committee_post: Optional[str] = None
    committee_role: Optional[CommitteeRole] = None
    is_committee: bool = False
    is_executive: bool = False
    is_representative: bool = False
    is_developer: bool = False
    managed_department: Optional[str] = None


@dataclass(frozen=True)
class ResourceScope:
    department: Optional[str] = None
    project_id: Optional[str] = None
    conversation_id: Optional[str] = None


@dataclass(frozen=True)
class PolicyRule:
    kind: RuleKind
    roles: frozenset = field(default_factory=frozenset)
    committee_roles: frozenset = field(default_factory=frozenset)
    post_substrings: frozenset = field(default_factory=frozenset)
    flags: frozenset = field(default_factory=frozenset)
    committee_scoped: Optional[bool] = None
    scoped_by_department: bool = False

    def __post_init__(self):
        unknown = set(self.flags) - PRINCIPAL_FLAGS
        if unknown:
            raise ValueError(f"Unknown principal flag(s) in rule: {sorted(unknown)}")
        # Chair override follows the rule kind unless stated otherwise
        if self.committee_scoped is None:
            object.__setattr__(self, "committee_scoped", self.kind == RuleKind.Committee)

    @classmethod
    def role(cls, *roles: Role, flags: Iterable[str] = ()) -> "PolicyRule":
        return cls(RuleKind.Role, roles=frozenset(roles), flags=frozenset(flags))

    @classmethod
    def committee(cls, *committee_roles: CommitteeRole, scoped_by_department: bool = False) -> "PolicyRule":
        return cls(
            RuleKind.Committee,
            committee_roles=frozenset(committee_roles),
            scoped_by_department=scoped_by_department,
        )

    @classmethod
    def post(cls, *substrings: str, flags: Iterable[str] = ()) -> "PolicyRule":
        return cls(RuleKind.Post, post_substrings=frozenset(substrings), flags=frozenset(flags))


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(False, reason)


ALLOW = Decision(True)


# ==========================================================
# RULE TABLE
# ==========================================================
_LEADERSHIP_ROLES = (
    Role.Admin,
    Role.CommitteeChair,
    Role.CommitteeViceChair,
    Role.Secretary,
    Role.ViceSecretary,
)

DEFAULT_RULES: Mapping[str, PolicyRule] = MappingProxyType({
    # --- users & dashboard ---
    "manage_users": PolicyRule.role(Role.Admin),
    "view_dashboard_stats": PolicyRule.role(Role.Admin),

    # --- announcements ---
    "post_announcement": PolicyRule.post("Representative", "Chair", "Secretary"),
    "delete_announcement": PolicyRule.role(Role.Admin),

    # --- courses ---
    "create_course": PolicyRule.role(*_LEADERSHIP_ROLES, flags=("is_committee",)),
    "delete_course": PolicyRule.role(Role.Admin),

    # --- events ---
    "approve_event": PolicyRule.role(Role.CommitteeChair),
    "create_event": PolicyRule.role(Role.ExecutiveHead, Role.Admin),
    "update_event": PolicyRule.role(Role.ExecutiveHead, Role.Admin, flags=("is_committee",)),
    "delete_event": PolicyRule.role(Role.Admin),

    # --- departments ---
    "view_department_students": PolicyRule.committee(
        CommitteeRole.DeptHead, CommitteeRole.DeptViceHead, CommitteeRole.Chair,
        scoped_by_department=True,
    ),
    "view_department_stats": PolicyRule.committee(
        CommitteeRole.DeptHead, CommitteeRole.DeptViceHead, CommitteeRole.Chair,
    ),
    "edit_department_student": PolicyRule.committee(
        CommitteeRole.DeptHead, CommitteeRole.Chair,
        scoped_by_department=True,
    ),

    # --- permission requests ---
    "view_permissions": PolicyRule.committee(
        CommitteeRole.Representative, CommitteeRole.Chair, CommitteeRole.Secretary,
        CommitteeRole.ViceChair, CommitteeRole.ViceSecretary,
    ),
    "respond_permission": PolicyRule.committee(
        CommitteeRole.Representative, CommitteeRole.Chair, CommitteeRole.Secretary,
    ),

    # --- queries ---
    "view_queries": PolicyRule.post("Representative", flags=("is_committee",)),
    "respond_query": PolicyRule.post("Representative", "Chair", "Secretary"),

    # --- site ---
    "edit_site_config": PolicyRule.role(Role.Admin, flags=("is_developer",)),

    # --- projects, messaging, reports ---
    "review_project": PolicyRule.role(Role.Faculty, Role.Admin),
    "create_channel": PolicyRule.role(Role.Admin),
    "sync_committee_friendships": PolicyRule.role(Role.Admin),
    "manage_report_formats": PolicyRule.role(Role.Admin),
    "generate_statistics_report": PolicyRule.role(Role.Admin),
})


# ==========================================================
# EVALUATION
# ==========================================================
def _is_eligible(principal: Principal, rule: PolicyRule) -> Decision:
    if any(getattr(principal, flag, False) for flag in rule.flags):
        return ALLOW

    if rule.kind == RuleKind.Role:
        if principal.role in rule.roles:
            return ALLOW
        return Decision.deny(DenyReason.InsufficientRole)

    if rule.kind == RuleKind.Committee:
        if not principal.is_committee:
            return Decision.deny(DenyReason.InsufficientCommitteeRole)
        if principal.committee_role in rule.committee_roles:
            return ALLOW
        return Decision.deny(DenyReason.InsufficientCommitteeRole)

    post = principal.committee_post or ""
    if any(substring in post for substring in rule.post_substrings):
        return ALLOW
    return Decision.deny(DenyReason.InsufficientRole)


def authorize(
    principal: Principal,
    action: str,
    scope: Optional[ResourceScope] = None,
    rules: Mapping[str, PolicyRule] = DEFAULT_RULES,
) -> Decision:
    """
    Decide whether ``principal`` may perform ``action`` on ``scope``.

    Order: unknown action, admin override, chair override (committee-scoped
    rules only), eligibility by rule kind, department scope.
    """
    rule = rules.get(action)
    if rule is None:
        return Decision.deny(DenyReason.UnknownAction)

    if principal.role == Role.Admin:
        return ALLOW

    if rule.committee_scoped and principal.committee_role == CommitteeRole.Chair:
        return ALLOW

    decision = _is_eligible(principal, rule)
    if not decision or not rule.scoped_by_department:
        return decision

    department = scope.department if scope else None
    if department is not None and department == principal.managed_department:
        return ALLOW
    return Decision.deny(DenyReason.OutOfScope)


def validate_actions(actions: Iterable[str], rules: Mapping[str, PolicyRule] = DEFAULT_RULES) -> None:
    missing = [a for a in actions if a not in rules]
    if missing:
        raise UnknownActionError(missing)
