import base64
from unittest.mock import MagicMock

from dailyreport.mailbox import GmailMailbox, build_query, message_from_api


def _b64(text):
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


API_MESSAGE = {
    "id": "m1",
    "labelIds": ["INBOX", "UNREAD"],
    "payload": {
        "headers": [{"name": "Subject", "value": "Classroom Report for Wednesday [21 Oct 2026]"}],
        "parts": [
            {"mimeType": "multipart/alternative", "parts": [
                {"mimeType": "text/plain", "body": {"data": _b64("8:57 AM Arrived.")}},
                {"mimeType": "text/html", "body": {"data": _b64("<p>8:57 AM Arrived.</p>")}},
            ]},
            {"mimeType": "image/png", "body": {"attachmentId": "a1"}},
        ],
    },
}


def test_build_query():
    assert build_query("Classroom Report", 1) == 'subject:"Classroom Report" newer_than:1d'
    assert build_query("Classroom Report", 0, unread_only=True) == (
        'subject:"Classroom Report" newer_than:1d is:unread'
    )


def test_message_from_api():
    msg = message_from_api(API_MESSAGE)
    assert msg.id == "m1"
    assert msg.subject == "Classroom Report for Wednesday [21 Oct 2026]"
    assert msg.plain_body == "8:57 AM Arrived."
    assert msg.html_body == "<p>8:57 AM Arrived.</p>"
    assert msg.unread is True


def test_search_threads_and_mark_read():
    service = MagicMock()
    threads_api = service.users.return_value.threads.return_value
    threads_api.list.return_value.execute.return_value = {"threads": [{"id": "t1"}]}
    threads_api.get.return_value.execute.return_value = {"id": "t1", "messages": [API_MESSAGE]}

    mailbox = GmailMailbox(service)
    threads = mailbox.search_threads("Classroom Report", days_back=2, unread_only=True)

    assert len(threads) == 1
    assert threads[0].messages[0].plain_body == "8:57 AM Arrived."
    q = threads_api.list.call_args.kwargs["q"]
    assert q == 'subject:"Classroom Report" newer_than:2d is:unread'

    mailbox.mark_read("m1")
    service.users.return_value.messages.return_value.modify.assert_called_once_with(
        userId="me", id="m1", body={"removeLabelIds": ["UNREAD"]}
    )


def test_search_threads_empty():
    service = MagicMock()
    service.users.return_value.threads.return_value.list.return_value.execute.return_value = {}
    assert GmailMailbox(service).search_threads("Classroom Report") == []
