"""
MessageBroker tests: synchronous, registration-ordered delivery and the
optional broadcast pipe.
"""

import simpy

from simulator.infrastructure.message_broker import MessageBroker


def test_subscribers_called_in_registration_order(env):
    broker = MessageBroker(env)
    calls = []
    broker.subscribe('topic', lambda message: calls.append(('first', message['value'])))
    broker.subscribe('topic', lambda message: calls.append(('second', message['value'])))

    broker.publish('topic', {'value': 1})

    assert calls == [('first', 1), ('second', 1)]


def test_publish_stamps_timestamp_without_mutating_input(env):
    broker = MessageBroker(env)
    received = []
    broker.subscribe('topic', received.append)

    def process():
        yield env.timeout(2.5)
        original = {'value': 1}
        broker.publish('topic', original)
        assert 'timestamp' not in original

    env.process(process())
    env.run()

    assert received[0]['timestamp'] == 2.5


def test_unsubscribe(env):
    broker = MessageBroker(env)
    received = []
    broker.subscribe('topic', received.append)

    assert broker.unsubscribe('topic', received.append) is True
    assert broker.unsubscribe('topic', received.append) is False
    broker.publish('topic', {})

    assert received == []
    assert broker.subscriber_count('topic') == 0


def test_other_topics_are_not_delivered(env):
    broker = MessageBroker(env)
    received = []
    broker.subscribe('a', received.append)

    broker.publish('b', {'value': 1})

    assert received == []


def test_broadcast_pipe_receives_every_message(env):
    broker = MessageBroker(env, broadcast=True)
    pipe = broker.get_broadcast_pipe()
    assert isinstance(pipe, simpy.Store)

    broker.publish('a', {'value': 1})
    broker.publish('b', {'value': 2})

    assert [item['topic'] for item in pipe.items] == ['a', 'b']
    assert pipe.items[1]['message']['value'] == 2


def test_broadcast_disabled_by_default(env):
    assert MessageBroker(env).get_broadcast_pipe() is None
