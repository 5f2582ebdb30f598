import unittest
from unittest.mock import Mock, call

from hamcrest import assert_that, is_

from ev3connection.support.events import EventSource


class EventsTest(unittest.TestCase):

    def test_no_listeners(self):
        sut = EventSource()
        sut.fire(1)

    def test_add_handlers(self):
        sut = EventSource()
        m1 = Mock()
        sut.add(m1)
        assert_that(sut._handlers, is_([m1]))

        sut += m1
        assert_that(sut._handlers, is_([m1, m1]))
        assert_that(len(sut), is_(2))

    def test_listeners(self):
        sut = EventSource()
        l1 = Mock()
        l2 = Mock()
        sut += l1
        sut += l2
        sut.fire(1, v="hey")
        l1.assert_called_once_with(1, v="hey")
        l2.assert_called_once_with(1, v="hey")

    def test_duplicate_handler_is_invoked_per_registration(self):
        sut = EventSource()
        handler = Mock()
        sut.add(handler).add(handler)
        sut.fire(True)
        assert_that(handler.mock_calls, is_([call(True), call(True)]))

    def test_handlers_called_in_registration_order(self):
        sut = EventSource()
        manager = Mock()
        sut += manager.first
        sut += manager.second
        sut.fire('x')
        assert_that(manager.mock_calls, is_([call.first('x'), call.second('x')]))

    def test_handler_added_during_fire_is_not_called_until_next_fire(self):
        sut = EventSource()
        late = Mock()

        def add_late(*args):
            sut.add(late)

        sut += add_late
        sut.fire(1)
        late.assert_not_called()
        sut.fire(2)
        late.assert_called_once_with(2)


if __name__ == '__main__':  # pragma no cover
    unittest.main()
