# This project was developed with assistance from AI tools.
"""Status transition table and document type groupings."""

import pytest

from db.enums import ApplicationStatus, CommitteeOutcome, DocumentType

S = ApplicationStatus


def test_every_status_has_a_transition_entry():
    assert set(ApplicationStatus.valid_transitions()) == set(ApplicationStatus)


@pytest.mark.parametrize("status", sorted(ApplicationStatus.terminal_statuses()))
def test_terminal_statuses_have_no_successors(status):
    assert ApplicationStatus.valid_transitions()[status] == frozenset()


def test_terminal_statuses():
    assert ApplicationStatus.terminal_statuses() == {S.APPROVED, S.REJECTED}


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (S.PENDING, S.UNDER_REVIEW),
        (S.UNDER_REVIEW, S.RM_RECCOMENDATION),
        (S.RM_RECCOMENDATION, S.UNDER_REVIEW),
        (S.UNDER_REVIEW, S.ANALYSIS_COMPLETED),
        (S.UNDER_REVIEW, S.CONDITIONAL),
        (S.ANALYSIS_COMPLETED, S.SUPERVISOR_REVIEWING),
        (S.CONDITIONAL, S.SUPERVISOR_REVIEWING),
        (S.SUPERVISOR_REVIEWING, S.SUPERVISED),
        (S.SUPERVISED, S.FINAL_ANALYSIS),
        (S.SUPERVISED, S.COMMITTE_REVIEW),
        (S.FINAL_ANALYSIS, S.MEMBER_REVIEW),
        (S.MEMBER_REVIEW, S.COMMITTE_REVIEW),
        (S.COMMITTE_REVIEW, S.APPROVED),
        (S.COMMITTE_REVIEW, S.REJECTED),
        (S.COMMITTE_REVIEW, S.COMMITTE_REVERSED),
        (S.COMMITTE_REVERSED, S.COMMITTE_REVIEW),
    ],
)
def test_allowed_transitions(current, target):
    assert target in ApplicationStatus.valid_transitions()[current]


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (S.PENDING, S.APPROVED),
        (S.PENDING, S.SUPERVISED),
        (S.UNDER_REVIEW, S.PENDING),
        (S.SUPERVISOR_REVIEWING, S.COMMITTE_REVIEW),
        (S.MEMBER_REVIEW, S.APPROVED),
        (S.APPROVED, S.REJECTED),
    ],
)
def test_disallowed_transitions(current, target):
    assert target not in ApplicationStatus.valid_transitions()[current]


def test_status_values_match_names():
    for status in ApplicationStatus:
        assert status.value == status.name


def test_committee_outcomes_are_statuses():
    for outcome in CommitteeOutcome:
        assert ApplicationStatus(outcome.value) in ApplicationStatus.valid_transitions()[
            S.COMMITTE_REVIEW
        ]


def test_required_and_analysis_documents_are_disjoint():
    required = DocumentType.required_at_submission()
    analysis = DocumentType.analysis_documents()
    assert not required & analysis
    assert DocumentType.SHAREHOLDERS_DETAILS not in required
    assert DocumentType.OTHER_LINE_BUSINESS not in required
    assert len(analysis) == 6
