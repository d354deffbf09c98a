"""Answer visibility rules, exercised on literal JSON fixtures."""

import json

from partyhub.services.visibility import OtherAnswers, count_attending, filter_other_answers

BLOCKS = [
    {"id": "a1", "template": "attendance"},
    {"id": "b1", "template": "text", "content": '{"public":true}'},
    {"id": "c1", "template": "text", "content": '{"public":false}'},
    {"id": "d1", "template": "text", "content": '{"label":"secret"}'},
]


def other(invitation_id, answers, name):
    return OtherAnswers(invitation_id=invitation_id, answers=json.dumps(answers), guest_name=name)


def test_not_attending_guest_only_shows_attendance():
    blocks = [
        {"id": "a1", "template": "attendance"},
        {"id": "b1", "template": "text", "content": '{"public":true}'},
    ]
    result = filter_other_answers(blocks, [other("x", {"a1": 2, "b1": "hi"}, "X")], organizer=False)
    assert result == [{"a1": {"answer": 2, "guest_name": "X"}}]


def test_attending_guest_shows_public_blocks_only():
    answers = {"a1": 0, "b1": "salad", "c1": "hidden", "d1": "also hidden"}
    result = filter_other_answers(BLOCKS, [other("x", answers, "X")], organizer=False)
    assert result == [{
        "a1": {"answer": 0, "guest_name": "X"},
        "b1": {"answer": "salad", "guest_name": "X"},
    }]


def test_non_public_blocks_never_shown_to_guests():
    others = [
        other("x", {"a1": 0, "c1": "no", "d1": "no"}, "X"),
        other("y", {"a1": 1, "c1": "no"}, "Y"),
        other("z", {"c1": "no"}, "Z"),
    ]
    for guest_answers in filter_other_answers(BLOCKS, others, organizer=False):
        assert "c1" not in guest_answers
        assert "d1" not in guest_answers


def test_guest_without_visible_answers_is_dropped():
    result = filter_other_answers(BLOCKS, [other("z", {"c1": "x"}, "Z")], organizer=False)
    assert result == []


def test_attendance_hidden_when_nothing_is_public():
    blocks = [
        {"id": "a1", "template": "attendance"},
        {"id": "c1", "template": "text", "content": '{"label":"private"}'},
    ]
    result = filter_other_answers(blocks, [other("x", {"a1": 0, "c1": "x"}, "X")], organizer=False)
    assert result == []


def test_attendance_explicitly_private_is_hidden():
    blocks = [
        {"id": "a1", "template": "attendance", "content": '{"public":false}'},
        {"id": "b1", "template": "text", "content": '{"public":true}'},
    ]
    result = filter_other_answers(blocks, [other("x", {"a1": 0, "b1": "hi"}, "X")], organizer=False)
    assert result == [{"b1": {"answer": "hi", "guest_name": "X"}}]


def test_no_attendance_block_means_no_rsvp_gate():
    blocks = [{"id": "b1", "template": "text", "content": '{"public":true}'}]
    result = filter_other_answers(blocks, [other("x", {"b1": "hi"}, "X")], organizer=False)
    assert result == [{"b1": {"answer": "hi", "guest_name": "X"}}]


def test_organizer_sees_everything_and_unconfirmed_marker():
    others = [
        other("x", {"a1": 0, "c1": "nuts"}, "Xena"),
        other("y", {"a1": 2, "d1": "secret"}, "Yuri"),
        other("z", {}, "Zoe"),
    ]
    result = filter_other_answers(BLOCKS, others, organizer=True)
    assert result == [
        {"a1": {"answer": 0, "guest_name": "Xena"}, "c1": {"answer": "nuts", "guest_name": "Xena"}},
        {"a1": {"answer": 2, "guest_name": "Yuri (?)"}, "d1": {"answer": "secret", "guest_name": "Yuri (?)"}},
        {},
    ]


def test_organizer_without_attendance_block_gets_no_marker():
    blocks = [{"id": "b1", "template": "text"}]
    result = filter_other_answers(blocks, [other("x", {"b1": "hi"}, "X")], organizer=True)
    assert result == [{"b1": {"answer": "hi", "guest_name": "X"}}]


def test_viewer_own_invitation_is_excluded():
    others = [other("me", {"a1": 0, "b1": "mine"}, "Me"), other("x", {"a1": 0, "b1": "hi"}, "X")]
    for organizer in (True, False):
        result = filter_other_answers(BLOCKS, others, organizer=organizer, viewer_invitation_id="me")
        assert len(result) == 1
        assert result[0]["b1"]["guest_name"].startswith("X")


def test_malformed_answers_degrade_to_nothing():
    others = [OtherAnswers(invitation_id="x", answers="{not json", guest_name="X")]
    assert filter_other_answers(BLOCKS, others, organizer=False) == []
    assert filter_other_answers(BLOCKS, others, organizer=True) == [{}]


def test_malformed_block_content_is_not_public():
    blocks = [
        {"id": "a1", "template": "attendance"},
        {"id": "b1", "template": "text", "content": "{broken"},
    ]
    result = filter_other_answers(blocks, [other("x", {"a1": 0, "b1": "hi"}, "X")], organizer=False)
    assert result == []


def test_already_decoded_answers_are_accepted():
    others = [OtherAnswers(invitation_id="x", answers={"a1": 0, "b1": "hi"}, guest_name="X")]
    result = filter_other_answers(BLOCKS, others, organizer=False)
    assert result[0]["b1"]["answer"] == "hi"


def test_count_attending():
    maps = ['{"a1": 0}', '{"a1": 1}', '{"a1": 0, "b1": "x"}', "garbage", '{"a1": false}']
    assert count_attending(BLOCKS, maps) == 2
    assert count_attending([{"id": "b1", "template": "text"}], maps) == 0
