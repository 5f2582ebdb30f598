import io
import unittest
from unittest.mock import Mock, PropertyMock, call, patch

from hamcrest import assert_that, contains_exactly, is_, none

from ev3connection.protocol.driver import StreamDriver, StreamEvent
from ev3connection.protocol.frame import Frame, encode_length
from ev3connection.protocol.write_queue import WriteQueue


class ShortWriter:
    """ accepts at most `accept` bytes of each write in turn, recording what it was offered """

    def __init__(self, *accept):
        self.accept = list(accept)
        self.offered = []
        self.received = bytearray()

    def write(self, data):
        self.offered.append(bytes(data))
        n = len(data) if not self.accept else min(self.accept.pop(0), len(data))
        self.received += data[:n]
        return n


def fake_conduit(input=b'', output=None, space=True):
    conduit = Mock()
    conduit.input = io.BytesIO(input)
    conduit.output = output if output is not None else ShortWriter()
    conduit.space_available = space
    return conduit


class StreamDriverWriteTest(unittest.TestCase):

    def setUp(self):
        self.sleep = Mock()
        self.reports = Mock()
        self.sut = StreamDriver(self.reports, WriteQueue(2), write_delay=0.125, sleep=self.sleep)
        self.conduit = fake_conduit()
        self.sut.attach(self.conduit)

    def test_initially_writable(self):
        assert_that(StreamDriver(Mock()).can_write, is_(True))
        assert_that(StreamDriver(Mock()).write_delay, is_(0.125))

    def test_write_when_writable_sends_and_sleeps(self):
        self.sut.write(b'abc')
        assert_that(self.conduit.output.offered, is_([b'abc']))
        assert_that(self.sut.can_write, is_(False))
        assert_that(self.sut.queue.is_empty, is_(True))
        self.sleep.assert_called_once_with(0.125)

    def test_write_when_not_writable_only_queues(self):
        self.sut.can_write = False
        self.sut.write(b'abc')
        assert_that(self.conduit.output.offered, is_([]))
        assert_that(list(self.sut.queue), is_([b'abc']))
        self.sleep.assert_not_called()

    def test_three_writes_while_not_writable_keep_the_newest_two(self):
        self.sut.can_write = False
        for p in (b'1', b'2', b'3'):
            self.sut.write(p)
        assert_that(list(self.sut.queue), contains_exactly(b'2', b'3'))

    def test_attempt_write_on_empty_queue_is_noop(self):
        self.sut.attempt_write()
        assert_that(self.sut.can_write, is_(True))
        self.sleep.assert_not_called()

    def test_attempt_write_when_detached_is_noop(self):
        self.sut.detach()
        self.sut.write(b'abc')
        assert_that(self.sut.can_write, is_(True))
        assert_that(list(self.sut.queue), is_([b'abc']))

    def test_no_space_keeps_head(self):
        self.conduit.space_available = False
        with patch('ev3connection.protocol.driver.logger') as log:
            self.sut.write(b'abc')
            log.warning.assert_called_once()
        assert_that(self.sut.can_write, is_(False))
        assert_that(list(self.sut.queue), is_([b'abc']))
        assert_that(self.conduit.output.offered, is_([]))
        self.sleep.assert_not_called()

    def test_short_write_retries_remainder_once_on_space(self):
        self.conduit.output = ShortWriter(3)
        data = bytes(range(10))
        self.sut.write(data)
        assert_that(list(self.sut.queue), is_([data[3:]]))
        assert_that(self.sut.queue.head_in_flight, is_(True))

        self.sut.handle_event(StreamEvent.HAS_SPACE_AVAILABLE)
        assert_that(self.conduit.output.offered, is_([data, data[3:]]))
        assert_that(bytes(self.conduit.output.received), is_(data))
        assert_that(self.sut.queue.is_empty, is_(True))

        self.sut.handle_event(StreamEvent.HAS_SPACE_AVAILABLE)
        assert_that(len(self.conduit.output.offered), is_(2))

    def test_would_block_write_keeps_whole_payload(self):
        self.conduit.output = Mock()
        self.conduit.output.write.return_value = None
        self.sut.write(b'abc')
        assert_that(list(self.sut.queue), is_([b'abc']))

    def test_transport_error_drops_payload_and_stays_writable(self):
        self.conduit.output = Mock()
        self.conduit.output.write.side_effect = OSError('gone')
        with patch('ev3connection.protocol.driver.logger') as log:
            self.sut.write(b'abc')
            log.error.assert_called_once()
        assert_that(self.sut.can_write, is_(True))
        assert_that(self.sut.queue.is_empty, is_(True))
        self.sleep.assert_not_called()

    def test_readiness_error_keeps_head(self):
        conduit = Mock()
        conduit.output = ShortWriter()
        type(conduit).space_available = PropertyMock(side_effect=ValueError('closed'))
        self.sut.attach(conduit)
        with patch('ev3connection.protocol.driver.logger') as log:
            self.sut.write(b'abc')
            log.warning.assert_called_once()
        assert_that(list(self.sut.queue), is_([b'abc']))
        assert_that(conduit.output.offered, is_([]))
        self.sleep.assert_not_called()

    def test_detach_drops_partly_written_payload(self):
        self.conduit.output = ShortWriter(3)
        self.sut.write(b'abcdef')
        self.sut.write(b'next')
        assert_that(list(self.sut.queue), is_([b'def', b'next']))
        assert_that(self.sut.detach(), is_(self.conduit))
        assert_that(list(self.sut.queue), is_([b'next']))
        assert_that(self.sut.can_write, is_(True))

    def test_detach_keeps_whole_payloads(self):
        self.sut.can_write = False
        self.sut.write(b'abc')
        self.sut.detach()
        assert_that(list(self.sut.queue), is_([b'abc']))
        assert_that(self.sut.can_write, is_(True))

    def test_space_available_writes_in_order(self):
        self.sut.can_write = False
        self.sut.write(b'a')
        self.sut.write(b'b')
        self.sut.handle_event(StreamEvent.HAS_SPACE_AVAILABLE)
        self.sut.handle_event(StreamEvent.HAS_SPACE_AVAILABLE)
        assert_that(self.conduit.output.offered, is_([b'a', b'b']))
        assert_that(self.sleep.mock_calls, is_([call(0.125), call(0.125)]))


class StreamDriverReadTest(unittest.TestCase):

    def setUp(self):
        self.reports = Mock()
        self.sut = StreamDriver(self.reports, sleep=Mock())

    def attach(self, data):
        conduit = fake_conduit(data)
        self.sut.attach(conduit)
        return conduit

    def test_read_frame(self):
        self.attach(b'\x02\x00hi')
        assert_that(self.sut.read_frame(), is_(Frame(b'hi')))

    def test_bytes_available_reports_payload_once(self):
        self.attach(bytes([0x05, 0x00, 0x01, 0x02, 0x03, 0x04, 0x05]))
        self.sut.handle_event(StreamEvent.HAS_BYTES_AVAILABLE)
        self.reports.assert_called_once_with(b'\x01\x02\x03\x04\x05')

    def test_short_payload_is_dropped(self):
        self.attach(encode_length(500) + bytes(400))
        with patch('ev3connection.protocol.driver.logger') as log:
            assert_that(self.sut.read_report(), is_(none()))
            log.warning.assert_called_once()
        self.reports.assert_not_called()

    def test_empty_read_is_dropped(self):
        self.attach(b'')
        assert_that(self.sut.read_report(), is_(none()))
        self.reports.assert_not_called()

    def test_zero_size_is_dropped(self):
        self.attach(b'\x00\x00')
        self.sut.read_report()
        self.reports.assert_not_called()

    def test_stream_error_is_dropped(self):
        conduit = self.attach(b'')
        conduit.input = Mock()
        conduit.input.read.side_effect = OSError('timeout')
        assert_that(self.sut.read_report(), is_(none()))
        self.reports.assert_not_called()

    def test_read_when_detached_is_noop(self):
        assert_that(self.sut.read_report(), is_(none()))

    def test_informational_events_are_logged_only(self):
        self.attach(b'\x01\x00a')
        with patch('ev3connection.protocol.driver.logger') as log:
            for event in (StreamEvent.OPEN_COMPLETED, StreamEvent.ERROR_OCCURRED,
                          StreamEvent.END_ENCOUNTERED, 'something else'):
                self.sut.handle_event(event)
            assert_that(log.info.call_count + log.warning.call_count, is_(4))
        self.reports.assert_not_called()
        assert_that(self.sut.can_write, is_(True))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
