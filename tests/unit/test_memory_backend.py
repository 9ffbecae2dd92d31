from textstore_lib.storage.base import Condition, WriteOutcome
from textstore_lib.storage.memory_backend import MemoryBlobBackend


def test_memory_basic_operations(memory_backend):
    m = memory_backend

    # namespace missing
    assert m.get('ns', 'a') is None
    assert m.put('ns', 'a', b'x', Condition.none()) is WriteOutcome.NOT_FOUND
    assert m.delete('ns', 'a', Condition.none()) is WriteOutcome.NOT_FOUND

    m.ensure_namespace_exists('ns')
    m.ensure_namespace_exists('ns')
    assert m.namespace_exists('ns') is True

    # put/get
    assert m.put('ns', 'a', b'x', Condition.none()) is WriteOutcome.OK
    read = m.get('ns', 'a')
    assert read.data == b'x'

    # delete
    assert m.delete('ns', 'a', Condition.none()) is WriteOutcome.OK
    assert m.get('ns', 'a') is None
    assert m.delete('ns', 'a', Condition.none()) is WriteOutcome.NOT_FOUND


def test_memory_conditions(memory_backend):
    m = memory_backend
    m.ensure_namespace_exists('ns')

    assert m.put('ns', 'a', b'1', Condition.must_not_exist()) is WriteOutcome.OK
    assert m.put('ns', 'a', b'2', Condition.must_not_exist()) is WriteOutcome.CONFLICT
    v1 = m.get('ns', 'a').version

    assert m.put('ns', 'a', b'2', Condition.must_match(v1)) is WriteOutcome.OK
    v2 = m.get('ns', 'a').version
    assert v2 != v1
    assert m.put('ns', 'a', b'3', Condition.must_match(v1)) is WriteOutcome.PRECONDITION_FAILED
    assert m.delete('ns', 'a', Condition.must_match(v1)) is WriteOutcome.PRECONDITION_FAILED
    assert m.get('ns', 'a').data == b'2'

    # must_match on a missing object
    assert m.put('ns', 'b', b'x', Condition.must_match(v2)) is WriteOutcome.PRECONDITION_FAILED

    assert m.delete('ns', 'a', Condition.must_match(v2)) is WriteOutcome.OK


def test_drop_namespace_removes_contents():
    m = MemoryBlobBackend()
    m.ensure_namespace_exists('ns')
    m.put('ns', 'a', b'x', Condition.none())
    m.drop_namespace('ns')
    assert m.namespace_exists('ns') is False
    assert m.get('ns', 'a') is None
    m.ensure_namespace_exists('ns')
    assert m.get('ns', 'a') is None
