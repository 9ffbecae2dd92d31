from types import SimpleNamespace

import pytest

from textstore_lib.storage.document_store import VersionedDocument, VersionedDocumentStore
from textstore_lib.storage.memory_backend import MemoryBlobBackend
from textstore_lib.storage.serializer import YAMLSerializer
from textstore_lib.storage.text_store import VersionedTextStore


def make_store(serializer=None):
    return VersionedDocumentStore(VersionedTextStore(MemoryBlobBackend(), 'docs'), serializer)


def test_read_missing_document_returns_none():
    assert make_store().read('missing') is None


def test_json_document_round_trip_and_raw_text():
    text_store = VersionedTextStore(MemoryBlobBackend(), 'docs')
    docs = VersionedDocumentStore(text_store)
    docs.create_or_update('host-1', {'name': 'worker', 'slots': [1, 2]})
    got = docs.read('host-1')
    assert isinstance(got, VersionedDocument)
    assert got.document == {'name': 'worker', 'slots': [1, 2]}
    # stored as plain JSON text
    assert text_store.read('host-1').content == '{"name": "worker", "slots": [1, 2]}'
    assert got.version == text_store.read('host-1').version


def test_optimistic_update_of_documents():
    docs = make_store()
    assert docs.try_create('d', {'count': 0}) is True
    assert docs.try_create('d', {'count': 99}) is False
    first = docs.read('d')
    assert docs.try_update('d', {'count': first.document['count'] + 1}, first.version) is True
    assert docs.try_update('d', {'count': 42}, first.version) is False
    assert docs.read('d').document == {'count': 1}


def test_delete_documents():
    docs = make_store()
    docs.create_or_update('d', [1])
    v = docs.read('d').version
    docs.create_or_update('d', [2])
    assert docs.try_delete('d', v) is False
    assert docs.try_delete('d', docs.read('d').version) is True
    docs.delete_if_exists('d')
    assert docs.read('d') is None


def test_yaml_serializer_store():
    docs = make_store(YAMLSerializer())
    docs.create_or_update('cfg', {'a': {'b': 1}})
    assert docs.read('cfg').document == {'a': {'b': 1}}


def test_objects_are_stored_via_their_attributes():
    docs = make_store()
    docs.create_or_update('obj', SimpleNamespace(x=1, y='z'))
    assert docs.read('obj').document == {'x': 1, 'y': 'z'}


def test_corrupt_text_raises_on_read():
    text_store = VersionedTextStore(MemoryBlobBackend(), 'docs')
    text_store.create_or_update('bad', '{not json')
    with pytest.raises(ValueError):
        VersionedDocumentStore(text_store).read('bad')
