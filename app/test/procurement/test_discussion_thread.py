"""
Discussion threads on need expressions
"""
import pytest

from app.buisness.procurement.discussion_thread import DiscussionThread
from app.buisness.procurement.errors import InsufficientRole, InvalidInput, NotFound
from app.data.procurement import Discussion


def test_participants_post_oldest_first(seed, make_expression):
    expression = make_expression()
    DiscussionThread.post(expression.id, seed.requester_id, 'Needed before the audit')
    DiscussionThread.post(expression.id, seed.approver_id, 'Please split the toner request')
    DiscussionThread.post(expression.id, seed.admin_id, 'Supplier confirmed')

    messages = DiscussionThread.list(expression.id)
    assert [d.message for d in messages] == [
        'Needed before the audit',
        'Please split the toner request',
        'Supplier confirmed',
    ]
    assert messages[1].author_id == seed.approver_id


def test_other_requesters_cannot_post(seed, make_expression):
    expression = make_expression()
    with pytest.raises(InsufficientRole):
        DiscussionThread.post(expression.id, seed.other_requester_id, 'Me too')


def test_empty_message(seed, make_expression):
    expression = make_expression()
    with pytest.raises(InvalidInput):
        DiscussionThread.post(expression.id, seed.requester_id, '   ')
    assert Discussion.query.count() == 0


def test_delete_by_author_or_administrator(seed, make_expression):
    expression = make_expression()
    mine = DiscussionThread.post(expression.id, seed.requester_id, "first").id
    theirs = DiscussionThread.post(expression.id, seed.approver_id, "second").id

    with pytest.raises(InsufficientRole):
        DiscussionThread.delete(theirs, seed.requester_id)

    DiscussionThread.delete(mine, seed.requester_id)
    DiscussionThread.delete(theirs, seed.admin_id)
    assert DiscussionThread.list(expression.id) == []

    with pytest.raises(NotFound):
        DiscussionThread.delete(mine, seed.admin_id)
