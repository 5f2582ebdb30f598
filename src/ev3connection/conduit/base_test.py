import io
import unittest
from unittest.mock import Mock

from hamcrest import assert_that, calling, is_, raises

from ev3connection.conduit.base import Conduit, DefaultConduit


class ConduitTest(unittest.TestCase):

    def test_abstract_methods(self):
        sut = Conduit()
        assert_that(calling(sut.close), raises(NotImplementedError))
        for name in ('target', 'input', 'output', 'open', 'bytes_available', 'space_available'):
            assert_that(calling(getattr).with_args(sut, name), raises(NotImplementedError))


class DefaultConduitTest(unittest.TestCase):

    def test_single_stream(self):
        stream = io.BytesIO()
        sut = DefaultConduit(stream)
        assert_that(sut.input, is_(stream))
        assert_that(sut.output, is_(stream))
        assert_that(sut.target, is_(stream))

    def test_separate_streams(self):
        read, write = Mock(), Mock()
        sut = DefaultConduit(read, write)
        assert_that(sut.input, is_(read))
        assert_that(sut.output, is_(write))
        sut.close()
        read.close.assert_called_once()
        write.close.assert_called_once()
        assert_that(sut.open, is_(False))
        assert_that(sut.space_available, is_(False))

    def test_single_stream_closed_once(self):
        stream = Mock()
        sut = DefaultConduit(stream)
        sut.close()
        stream.close.assert_called_once()

    def test_bytes_available_from_in_waiting(self):
        read = Mock()
        read.in_waiting = 0
        sut = DefaultConduit(read, Mock())
        assert_that(sut.bytes_available, is_(False))
        read.in_waiting = 2
        assert_that(sut.bytes_available, is_(True))

    def test_bytes_available_does_not_peek(self):
        read = Mock(spec=['peek', 'read', 'close'])
        sut = DefaultConduit(read, Mock())
        assert_that(sut.bytes_available, is_(False))
        read.peek.assert_not_called()

    def test_no_readiness_support(self):
        sut = DefaultConduit(object(), io.BytesIO())
        assert_that(sut.bytes_available, is_(False))
        assert_that(sut.space_available, is_(True))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
