import pytest

import ticketclient
from ticketclient import dispatch
from ticketclient.connection import ConnectionState
from ticketclient.ledger import JobStatus
from conftest import FakeHttp


def open_session(session, transport):
    session.connection.connect()
    transport.instances[-1].fire_open()
    return transport.instances[-1]


def test_submit_sends_one_frame(session, transport, recorder, document):

    recorder.attach(session)
    connection = open_session(session, transport)

    job_id = session.submit(document)

    assert connection.sent == [{'tipo': 'ticket', 'id': job_id, 'datos': document}]
    assert session.ledger[job_id].status == JobStatus.PENDING
    assert session.jobs_sent == 1
    assert (dispatch.SENT, 'Job: ' + job_id) in recorder.log


def test_submit_document_object(session, transport, document):

    connection = open_session(session, transport)
    ticket = ticketclient.TicketDocument.from_dict(document)

    job_id = session.submit(ticket)
    assert connection.sent[0]['datos'] == ticket.to_dict()
    assert connection.sent[0]['id'] == job_id


def test_submit_invalid(session, transport, document):

    connection = open_session(session, transport)
    del document['version']

    with pytest.raises(ticketclient.ValidationError) as caught:
        session.submit(document)

    assert caught.value.field == 'version'
    assert connection.sent == []
    assert len(session.ledger) == 0
    assert session.jobs_sent == 0


def test_submit_disconnected(session, recorder, document):

    recorder.attach(session)

    with pytest.raises(ticketclient.SubmissionError):
        session.submit(document)

    jobs = session.ledger.jobs()
    assert len(jobs) == 1
    assert jobs[0].status == JobStatus.FAILED
    assert session.jobs_sent == 0
    assert (dispatch.FAILURE, 'Not connected') in recorder.notify


def test_job_lifecycle(session, transport, recorder, document):

    recorder.attach(session)
    connection = open_session(session, transport)

    job_id = session.submit(document)
    connection.fire_message('{"tipo":"ack","id":"%s","current":3,"capacity":100}' % (job_id,))
    assert session.ledger[job_id].status == JobStatus.ACKNOWLEDGED

    connection.fire_message('{"tipo":"result","id":"%s","status":"success","mensaje":"done"}' % (job_id,))
    assert session.ledger[job_id].status == JobStatus.SUCCEEDED
    assert (dispatch.SUCCESS, 'Print completed') in recorder.notify


def test_burst(session, transport, recorder):

    recorder.attach(session)
    connection = open_session(session, transport)

    sent = session.burst()

    assert len(sent) == 10
    assert len(set(sent)) == 10
    assert len(connection.sent) == 10
    assert session.jobs_sent == 10
    assert [frame['id'] for frame in connection.sent] == sent
    assert (dispatch.WARNING, 'Burst: 10 jobs sent') in recorder.notify

    for frame in connection.sent:
        assert frame['tipo'] == 'ticket'
        assert frame['datos']['commands'] == [{'type': 'beep', 'data': {'times': 1, 'lapse': 1}}]


def test_burst_count(session, transport, document):

    connection = open_session(session, transport)
    sent = session.burst(document, 3)
    assert len(sent) == 3
    assert connection.sent[0]['datos'] == document


def test_burst_disconnected(session, document):

    sent = session.burst(document, 4)
    assert sent == []
    assert session.ledger.counts()[JobStatus.FAILED] == 4


def test_requests(session, transport, recorder):

    recorder.attach(session)

    assert session.ping() is None
    assert session.request_status() == False
    assert session.request_printers() == False

    connection = open_session(session, transport)

    ping_id = session.ping()
    assert ping_id is not None
    assert session.request_status() == True
    assert session.request_printers() == True

    assert connection.sent == [
        {'tipo': 'ping', 'id': ping_id},
        {'tipo': 'status'},
        {'tipo': 'get_printers'},
    ]


def test_open_refreshes_health(session, transport, http, recorder):

    recorder.attach(session)
    open_session(session, transport)

    assert len(http.requests) == 1
    assert http.requests[0][0] == 'http://localhost:8766/health'
    assert session.health.reachable == True
    assert (2, 50) in recorder.queue


def test_state_stream(session, transport, scheduler):

    states = list()

    def state(old, new):
        states.append(new)

    session.register('state', state)
    connection = open_session(session, transport)
    connection.fire_close()

    assert states == [
        ConnectionState.CONNECTING,
        ConnectionState.OPEN,
        ConnectionState.CLOSED,
        ConnectionState.RECONNECTING,
    ]
    assert session.state == ConnectionState.RECONNECTING
    assert scheduler.calls[0].delay == session.config.reconnect_delay


def test_stop_is_not_a_failure(session, transport, recorder):

    recorder.attach(session)
    open_session(session, transport)
    session.stop()

    assert session.state == ConnectionState.CLOSED
    assert recorder.log[-1] == (dispatch.INFO, 'Disconnected')
    assert (dispatch.FAILURE, 'Connection lost') not in recorder.notify


def test_burst_with_odd_health(transport, scheduler, document):

    config = ticketclient.config.SessionConfig(poll_interval=0)
    session = ticketclient.Session(config, transport=transport, scheduler=scheduler,
                                   http=FakeHttp({'worker': 'down'}))
    open_session(session, transport)

    assert len(session.burst(document, 3)) == 3
    assert session.health.reachable == True
    session.stop()


def test_token_header(transport, scheduler, http):

    config = ticketclient.config.SessionConfig(token='secret', poll_interval=0)
    session = ticketclient.Session(config, transport=transport, scheduler=scheduler, http=http)
    session.connection.connect()

    assert transport.instances[0].headers == {'X-Auth-Token': 'secret'}
    session.stop()


def test_channel_ordering(transport, scheduler, http, document):

    config = ticketclient.config.SessionConfig(poll_interval=0)
    session = ticketclient.Session(config, transport=transport, scheduler=scheduler, http=http)

    with session:
        connection = transport.instances[-1]
        connection.fire_open()
        assert session.wait(5) == True

        job_ids = session.burst(document, 5)
        for job_id in job_ids:
            connection.fire_message('{"tipo":"ack","id":"%s"}' % (job_id,))
            connection.fire_message('{"tipo":"result","id":"%s","status":"success"}' % (job_id,))

        assert session.wait(5) == True

        for job_id in job_ids:
            assert session.ledger[job_id].status == JobStatus.SUCCEEDED

    assert session.channel is None


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
